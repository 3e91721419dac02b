"""健康报告构建器"""

from typing import List, Sequence

from .site_environment import SiteEnvironment
from ..checkers.base import BaseCheckGroup, run_probe
from ..models.health_check import (SCHEMA_VERSION, Check, CheckCollection, CheckResult,
                                   CheckResultStatus, ComponentType, HealthReport, now)
from ..utils.exceptions import ConfigError
from ..utils.log_manager import get_logger


class HealthReportBuilder:
    """按固定顺序执行检查组并组装健康报告

    每次请求构建一份新报告，不保存跨请求状态。
    """

    def __init__(self, groups: Sequence[BaseCheckGroup], site: SiteEnvironment,
                 schema_version: str = SCHEMA_VERSION):
        """
        Args:
            groups: 检查组，按执行顺序排列
            site: 站点环境，提供报告的站点地址和描述
            schema_version: 报告结构版本

        Raises:
            ConfigError: 检查组名称重复
        """
        names = [group.name for group in groups]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ConfigError(f"检查组名称重复: {', '.join(duplicates)}")

        self.groups: List[BaseCheckGroup] = list(groups)
        self.site = site
        self.schema_version = schema_version
        self.logger = get_logger('report_builder')

    async def _run_group(self, group: BaseCheckGroup) -> Check:
        """执行单个检查组，逃逸的异常转换为该组的失败结果"""
        try:
            return await group.run()
        except Exception as e:
            self.logger.error(f"检查组 {group.name} 执行异常: {e}", exc_info=True)
            return Check(group.name, [CheckResult.create(
                CheckResultStatus.FAIL, group.name, ComponentType.SYSTEM,
                output=f"Check {group.name} failed unexpectedly: {e}"
            )])

    async def _site_identity(self):
        url = await run_probe(self.site.site_url)
        if not url.ok:
            self.logger.warning(f"读取站点地址失败，使用配置值: {url.error_text}")
        description = await run_probe(self.site.description)
        if not description.ok:
            self.logger.warning(f"读取站点描述失败，使用配置值: {description.error_text}")

        return (url.value if url.ok else self.site.fallback_url(),
                description.value if description.ok else self.site.fallback_description())

    async def build(self) -> HealthReport:
        """
        构建健康报告

        Returns:
            HealthReport: 新生成的报告，任何检查组出错都不会中断构建
        """
        checks = CheckCollection()
        for group in self.groups:
            checks.add_check(await self._run_group(group))

        release_id, description = await self._site_identity()
        report = HealthReport(
            release_id=release_id or '',
            description=description or '',
            checks=checks,
            time=now(),
            version=self.schema_version
        )

        failed = [r for r in checks.all_results() if r.status == CheckResultStatus.FAIL]
        if failed:
            self.logger.warning(f"健康报告生成完成，{len(failed)} 项检查失败")
        else:
            self.logger.debug(f"健康报告生成完成，共 {len(checks)} 个检查组")
        return report
