"""测试已启用插件检查组"""

import pytest
from unittest.mock import AsyncMock

from cms_health.checkers.base import CheckContext
from cms_health.checkers.plugin_checker import PluginCheckGroup
from cms_health.models.health_check import CheckResultStatus, ComponentType, component_id
from cms_health.services.site_environment import StaticSiteEnvironment
from cms_health.utils.exceptions import DataAccessError


def make_group(plugins=None):
    site = StaticSiteEnvironment({'url': 'https://example.com', 'active_plugins': plugins})
    return PluginCheckGroup(CheckContext(site=site))


class TestPluginCheckGroup:
    """测试PluginCheckGroup类"""

    def test_name(self):
        """测试检查组名称"""
        group = make_group()

        assert group.name == 'wordpress:plugins:active'
        assert group.validate_config() is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize('plugins', [
        [],
        ['hello.php'],
        ['akismet/akismet.php', 'hello.php', 'jetpack/jetpack.php'],
    ])
    async def test_always_info(self, plugins):
        """测试无论数量多少状态都是info"""
        check = await make_group(plugins).run()

        assert len(check.results) == 1
        result = check.results[0]
        assert result.status == CheckResultStatus.INFO
        assert result.observed_value == len(plugins)
        assert result.output is None
        assert result.component_type == ComponentType.COMPONENT
        assert result.component_id == component_id('wordpress:plugins:active')

    @pytest.mark.asyncio
    async def test_unconfigured_plugins_count_zero(self):
        """测试未配置插件列表时数量为0"""
        check = await make_group(None).run()
        assert check.results[0].observed_value == 0

    @pytest.mark.asyncio
    async def test_read_error_still_info(self):
        """测试读取失败时仍为info，并附带错误信息"""
        group = make_group()
        group.context.site.active_plugins = AsyncMock(
            side_effect=DataAccessError("MySQL连接超时", cause=TimeoutError()))

        check = await group.run()

        result = check.results[0]
        assert result.status == CheckResultStatus.INFO
        assert result.observed_value is None
        assert result.output == "Active plugins could not be read: TimeoutError"
