"""平台与运行时版本检查组"""

from typing import Any, Dict, List, Optional

from .base import BaseCheckGroup, CheckContext, ProbeResult, run_probe
from .factory import register_check_group
from ..models.health_check import CheckResult, CheckResultStatus, ComponentType
from ..services.release_client import PlatformReleaseClient
from ..utils.versioning import is_valid_version, version_at_least

DEFAULT_MIN_RUNTIME_VERSION = '7.4'


def compare_versions(current: str, minimum: str) -> ProbeResult[bool]:
    """比较 current >= minimum，无法识别的版本号作为失败结果返回"""
    try:
        return ProbeResult(value=version_at_least(current, minimum))
    except ValueError as e:
        return ProbeResult(error=e)


@register_check_group('version')
class VersionCheckGroup(BaseCheckGroup):
    """版本检查组

    平台版本与官方发布源比较；发布源不可用时按已是最新处理，
    避免网络抖动引起误报。运行时版本与最低推荐版本比较。
    """

    def __init__(self, context: CheckContext, config: Optional[Dict[str, Any]] = None):
        super().__init__(context, config)
        self.min_runtime_version = self.config.get('min_runtime_version',
                                                   DEFAULT_MIN_RUNTIME_VERSION)
        self.release_client = context.release_client or PlatformReleaseClient(self.config)

    @property
    def name(self) -> str:
        return f'{self.platform}:version'

    def validate_config(self) -> bool:
        if not is_valid_version(self.min_runtime_version):
            self.logger.error(f"最低运行时版本无效: {self.min_runtime_version!r}")
            return False
        timeout = self.config.get('timeout', 10)
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            self.logger.error(f"版本检查超时时间无效: {timeout!r}")
            return False
        return True

    async def is_latest_platform_version(self, current_version: str) -> bool:
        """判断当前平台版本是否为最新，无法确定时返回True"""
        latest = await run_probe(self.release_client.fetch_latest_version)

        if not latest.ok:
            self.logger.warning(f"无法获取最新版本，按已是最新处理: {latest.error_text}")
            return True

        if latest.value is None:
            self.logger.warning("发布源响应缺少版本字段，按已是最新处理")
            return True

        comparison = compare_versions(current_version, latest.value)
        if not comparison.ok:
            self.logger.warning(f"版本号无法比较，按已是最新处理: {comparison.error_text}")
            return True
        return comparison.value

    async def _platform_result(self) -> CheckResult:
        key = self.key('core', 'version')
        platform = self.context.site.platform_name
        current = await run_probe(self.context.site.platform_version)

        if not current.ok:
            self.logger.warning(f"读取{platform}版本失败: {current.error_text}")
            return CheckResult.create(
                CheckResultStatus.FAIL, key, ComponentType.SYSTEM,
                output=f"Unable to determine {platform} version: {current.cause_text}"
            )

        version = current.value
        if await self.is_latest_platform_version(version):
            status = CheckResultStatus.PASS
            output = f"{platform} is at the latest version ({version})"
        else:
            status = CheckResultStatus.WARN
            output = f"{platform} is not at the latest version (Current: {version})"

        return CheckResult.create(status, key, ComponentType.SYSTEM,
                                  observed_value=version, output=output)

    async def _runtime_result(self) -> CheckResult:
        key = self.key(self.context.site.runtime_slug, 'version')
        runtime = self.context.site.runtime_name
        current = await run_probe(self.context.site.runtime_version)

        if current.ok:
            version = current.value
            comparison = compare_versions(version, self.min_runtime_version)
        else:
            version, comparison = None, current

        if not comparison.ok:
            self.logger.warning(f"读取{runtime}版本失败: {comparison.error_text}")
            return CheckResult.create(
                CheckResultStatus.FAIL, key, ComponentType.SYSTEM,
                observed_value=version,
                output=f"Unable to determine {runtime} version: {comparison.cause_text}"
            )

        if comparison.value:
            status = CheckResultStatus.PASS
            output = f"{runtime} version ({version}) meets recommendations"
        else:
            status = CheckResultStatus.WARN
            output = (f"{runtime} version ({version}) is below recommended version "
                      f"{self.min_runtime_version}")

        return CheckResult.create(status, key, ComponentType.SYSTEM,
                                  observed_value=version, output=output)

    async def collect(self) -> List[CheckResult]:
        return [await self._platform_result(), await self._runtime_result()]
