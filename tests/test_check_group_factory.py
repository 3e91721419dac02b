"""测试检查组工厂与基类"""

import pytest

from cms_health.checkers import (DEFAULT_GROUP_ORDER, BaseCheckGroup, CheckContext,
                                 CheckGroupFactory, DatabaseCheckGroup, PluginCheckGroup,
                                 VersionCheckGroup, check_group_factory, run_probe)
from cms_health.services.data_access import DataAccess
from cms_health.services.site_environment import StaticSiteEnvironment
from cms_health.utils.exceptions import CheckError, DataAccessError


class NullDataAccess(DataAccess):
    async def scalar_query(self, sql, args=None):
        return '1'

    async def list_tables(self, prefix):
        return []

    async def get_option(self, name):
        return None


class DummyCheckGroup(BaseCheckGroup):
    """测试用检查组"""

    @property
    def name(self):
        return self.key('dummy')

    def validate_config(self):
        return self.config.get('valid', True)

    async def collect(self):
        return []


def make_context(**kwargs):
    site = StaticSiteEnvironment({'url': 'https://example.com', 'platform': 'My CMS'})
    return CheckContext(site=site, **kwargs)


class TestCheckGroupFactory:
    """测试CheckGroupFactory类"""

    def test_register_and_create(self):
        """测试注册与创建"""
        factory = CheckGroupFactory()
        factory.register_group('dummy', DummyCheckGroup)

        group = factory.create_group('dummy', make_context())

        assert isinstance(group, DummyCheckGroup)
        assert group.group_type == 'dummy'
        assert group.name == 'my-cms:dummy'
        assert factory.is_type_supported('dummy')
        assert factory.get_supported_types() == ['dummy']

    def test_register_duplicate(self):
        """测试重复注册"""
        factory = CheckGroupFactory()
        factory.register_group('dummy', DummyCheckGroup)

        with pytest.raises(CheckError, match="已经注册"):
            factory.register_group('dummy', DummyCheckGroup)

    def test_register_invalid_class(self):
        """测试注册非检查组类"""
        with pytest.raises(CheckError, match="必须继承自 BaseCheckGroup"):
            CheckGroupFactory().register_group('bad', dict)

    def test_create_unsupported(self):
        """测试创建未注册的类型"""
        factory = CheckGroupFactory()
        factory.register_group('dummy', DummyCheckGroup)

        with pytest.raises(CheckError, match="不支持的检查组类型") as exc_info:
            factory.create_group('unknown', make_context())

        assert "['dummy']" in exc_info.value.message

    def test_create_invalid_config(self):
        """测试配置验证失败"""
        factory = CheckGroupFactory()
        factory.register_group('dummy', DummyCheckGroup)

        with pytest.raises(CheckError, match="配置验证失败"):
            factory.create_group('dummy', make_context(), {'valid': False})


class TestDefaultGroups:
    """测试全局工厂中的默认检查组"""

    def test_builtin_types_registered(self):
        """测试内置检查组已注册"""
        for group_type in DEFAULT_GROUP_ORDER:
            assert check_group_factory.is_type_supported(group_type)

    def test_default_groups_in_fixed_order(self):
        """测试按固定顺序创建"""
        groups = check_group_factory.create_default_groups(
            make_context(data_access=NullDataAccess()),
            {'version': {'min_runtime_version': '8.1'}})

        assert [type(g) for g in groups] == [VersionCheckGroup, DatabaseCheckGroup,
                                             PluginCheckGroup]
        assert [g.name for g in groups] == ['my-cms:version', 'my-cms:database',
                                            'my-cms:plugins:active']
        assert groups[0].min_runtime_version == '8.1'

    def test_database_group_requires_data_access(self):
        """测试缺少数据访问时数据库检查组创建失败"""
        with pytest.raises(CheckError, match="database"):
            check_group_factory.create_default_groups(make_context())


class TestRunProbe:
    """测试探测结果封装"""

    @pytest.mark.asyncio
    async def test_success(self):
        async def probe():
            return 42

        result = await run_probe(probe)

        assert result.ok is True
        assert result.value == 42
        assert result.error_text == ''

    @pytest.mark.asyncio
    async def test_failure(self):
        async def probe():
            raise DataAccessError("查询失败")

        result = await run_probe(probe)

        assert result.ok is False
        assert result.value is None
        assert isinstance(result.error, DataAccessError)
        assert result.error_text == "查询失败"

    @pytest.mark.asyncio
    async def test_cause_text_prefers_driver_error(self):
        async def probe():
            raise DataAccessError("MySQL连接失败", cause=ConnectionRefusedError("Connection refused"))

        result = await run_probe(probe)

        assert result.error_text == "MySQL连接失败"
        assert result.cause_text == "Connection refused"

    @pytest.mark.asyncio
    async def test_cause_text_without_cause(self):
        async def probe():
            raise RuntimeError("gone away")

        assert (await run_probe(probe)).cause_text == "gone away"
