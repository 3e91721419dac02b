"""已启用插件检查组"""

from typing import List

from .base import BaseCheckGroup, run_probe
from .factory import register_check_group
from ..models.health_check import CheckResult, CheckResultStatus, ComponentType


@register_check_group('plugins')
class PluginCheckGroup(BaseCheckGroup):
    """只报告已启用插件数量，没有判定阈值，状态始终为info"""

    @property
    def name(self) -> str:
        return f'{self.platform}:plugins:active'

    def validate_config(self) -> bool:
        return True

    async def collect(self) -> List[CheckResult]:
        probe = await run_probe(self.context.site.active_plugins)

        if probe.ok:
            plugin_count = len(probe.value)
            output = None
            self.logger.debug(f"已启用插件数量: {plugin_count}")
        else:
            self.logger.warning(f"读取已启用插件失败: {probe.error_text}")
            plugin_count = None
            output = f"Active plugins could not be read: {probe.cause_text}"

        return [CheckResult.create(CheckResultStatus.INFO, self.key('plugins', 'active'),
                                   ComponentType.COMPONENT,
                                   observed_value=plugin_count, output=output)]
