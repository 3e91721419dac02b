"""测试站点环境"""

import os
import tempfile
import pytest
from unittest.mock import AsyncMock

from cms_health.services.data_access import DataAccess
from cms_health.services.site_environment import (
    StaticSiteEnvironment, WordPressSiteEnvironment, create_site_environment,
    parse_serialized_plugins, slugify
)
from cms_health.utils.exceptions import CmsHealthError, ConfigError, DataAccessError

SERIALIZED_PLUGINS = ('a:3:{i:0;s:19:"akismet/akismet.php";i:1;s:9:"hello.php";'
                      'i:2;s:19:"jetpack/jetpack.php";}')


def make_wordpress_root(version_line="$wp_version = '6.9';"):
    root = tempfile.mkdtemp()
    includes = os.path.join(root, 'wp-includes')
    os.makedirs(includes)
    with open(os.path.join(includes, 'version.php'), 'w', encoding='utf-8') as f:
        f.write("<?php\n/**\n * WordPress Version\n */\n" + version_line + "\n$wp_db_version = 60421;\n")
    return root


def make_data_access(options):
    data_access = AsyncMock(spec=DataAccess)
    data_access.get_option.side_effect = lambda name: options.get(name)
    return data_access


class TestStaticSiteEnvironment:
    """测试StaticSiteEnvironment类"""

    @pytest.mark.asyncio
    async def test_values_from_config(self):
        site = StaticSiteEnvironment({
            'url': 'https://example.com',
            'description': 'desc',
            'platform_version': '6.9',
            'runtime_version': '8.2.12',
            'active_plugins': ['hello.php'],
        })

        assert await site.site_url() == 'https://example.com'
        assert await site.description() == 'desc'
        assert await site.platform_version() == '6.9'
        assert await site.runtime_version() == '8.2.12'
        assert await site.active_plugins() == ['hello.php']

    def test_default_names(self):
        site = StaticSiteEnvironment({'url': 'https://example.com'})

        assert site.platform_name == 'WordPress'
        assert site.platform_slug == 'wordpress'
        assert site.runtime_slug == 'php'

    @pytest.mark.asyncio
    async def test_missing_versions(self):
        site = StaticSiteEnvironment({'url': 'https://example.com'})

        with pytest.raises(CmsHealthError, match="WordPress"):
            await site.platform_version()
        with pytest.raises(CmsHealthError, match="PHP"):
            await site.runtime_version()

    @pytest.mark.asyncio
    async def test_unquoted_version_rejected(self):
        """测试YAML解析成浮点数的版本号不会被静默截断"""
        site = StaticSiteEnvironment({'url': 'https://example.com',
                                      'platform_version': 6.10, 'runtime_version': 7.10})

        with pytest.raises(CmsHealthError, match="必须是字符串"):
            await site.platform_version()
        with pytest.raises(CmsHealthError, match="必须是字符串"):
            await site.runtime_version()


class TestWordPressSiteEnvironment:
    """测试WordPressSiteEnvironment类"""

    @pytest.mark.asyncio
    async def test_reads_install_and_options(self):
        root = make_wordpress_root()
        data_access = make_data_access({
            'siteurl': 'https://blog.example.com',
            'blogdescription': 'Just another WordPress site',
            'active_plugins': SERIALIZED_PLUGINS,
        })
        site = WordPressSiteEnvironment(
            {'wordpress_path': root, 'runtime_version': '8.3.1'}, data_access)

        assert await site.site_url() == 'https://blog.example.com'
        assert await site.description() == 'Just another WordPress site'
        assert await site.platform_version() == '6.9'
        assert await site.runtime_version() == '8.3.1'
        assert await site.active_plugins() == ['akismet/akismet.php', 'hello.php',
                                               'jetpack/jetpack.php']

    @pytest.mark.asyncio
    async def test_missing_option(self):
        site = WordPressSiteEnvironment({'wordpress_path': '/nonexistent'},
                                        make_data_access({}))

        with pytest.raises(DataAccessError, match="siteurl"):
            await site.site_url()
        assert await site.active_plugins() == []

    @pytest.mark.asyncio
    async def test_missing_version_file(self):
        site = WordPressSiteEnvironment({'wordpress_path': '/nonexistent'},
                                        make_data_access({}))

        with pytest.raises(CmsHealthError, match="无法读取版本文件"):
            await site.platform_version()

    @pytest.mark.asyncio
    async def test_version_file_without_version(self):
        root = make_wordpress_root(version_line="$wp_db_version = 1;")
        site = WordPressSiteEnvironment({'wordpress_path': root}, make_data_access({}))

        with pytest.raises(CmsHealthError, match=r"\$wp_version"):
            await site.platform_version()


class TestSerializedPlugins:
    """测试PHP序列化插件数组解析"""

    def test_parse(self):
        assert len(parse_serialized_plugins(SERIALIZED_PLUGINS)) == 3

    def test_empty(self):
        assert parse_serialized_plugins(None) == []
        assert parse_serialized_plugins('') == []
        assert parse_serialized_plugins('a:0:{}') == []

    def test_string_keys(self):
        raw = 'a:1:{s:4:"main";s:9:"hello.php";}'
        assert parse_serialized_plugins(raw) == ['hello.php']

    def test_not_serialized_array(self):
        with pytest.raises(DataAccessError, match="序列化数组"):
            parse_serialized_plugins('hello.php')


class TestFactory:
    """测试create_site_environment"""

    def test_static_default(self):
        site = create_site_environment({'url': 'https://example.com'})
        assert isinstance(site, StaticSiteEnvironment)

    def test_wordpress(self):
        site = create_site_environment({'source': 'wordpress', 'wordpress_path': '/srv/wp'},
                                       make_data_access({}))
        assert isinstance(site, WordPressSiteEnvironment)

    def test_wordpress_requires_data_access(self):
        with pytest.raises(ConfigError, match="database"):
            create_site_environment({'source': 'wordpress', 'wordpress_path': '/srv/wp'})

    def test_unsupported(self):
        with pytest.raises(ConfigError, match="不支持的站点来源"):
            create_site_environment({'source': 'joomla'})


def test_slugify():
    assert slugify('WordPress') == 'wordpress'
    assert slugify(' My CMS ') == 'my-cms'
