"""站点运行环境信息

提供站点地址、描述、平台版本、运行时版本和已启用插件列表。
``StaticSiteEnvironment`` 直接读取配置，``WordPressSiteEnvironment``
从WordPress安装目录和选项表中读取。
"""

import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from .data_access import DataAccess
from ..utils.exceptions import CmsHealthError, ConfigError, DataAccessError, ErrorCode
from ..utils.log_manager import get_logger

_WP_VERSION_PATTERN = re.compile(r"\$wp_version\s*=\s*['\"]([^'\"]+)['\"]")
_SERIALIZED_ARRAY_PATTERN = re.compile(r'^a:(\d+):\{')
_SERIALIZED_STRING_PATTERN = re.compile(r's:\d+:"([^"]*)";')


def slugify(name: str) -> str:
    """组件键使用的小写标识"""
    return re.sub(r'[^a-z0-9]+', '-', name.strip().lower()).strip('-')


class SiteEnvironment(ABC):
    """被检查站点的环境信息"""

    def __init__(self, site_config: Dict[str, Any]):
        self.site_config = site_config
        self.platform_name: str = site_config.get('platform', 'WordPress')
        self.runtime_name: str = site_config.get('runtime', 'PHP')
        self.logger = get_logger(f'site.{self.platform_slug}')

    @property
    def platform_slug(self) -> str:
        return slugify(self.platform_name)

    @property
    def runtime_slug(self) -> str:
        return slugify(self.runtime_name)

    def fallback_url(self) -> str:
        return self.site_config.get('url') or ''

    def fallback_description(self) -> str:
        return self.site_config.get('description') or ''

    def _configured_version(self, field: str, name: str) -> str:
        version = self.site_config.get(field)
        if not version:
            raise CmsHealthError(f"未配置 {name} 版本", ErrorCode.VALIDATION_ERROR)
        if not isinstance(version, str):
            raise CmsHealthError(f"{name} 版本必须是字符串: {version!r}",
                                 ErrorCode.VALIDATION_ERROR)
        return version

    @abstractmethod
    async def site_url(self) -> str:
        pass

    @abstractmethod
    async def description(self) -> str:
        pass

    @abstractmethod
    async def platform_version(self) -> str:
        pass

    async def runtime_version(self) -> str:
        return self._configured_version('runtime_version', self.runtime_name)

    @abstractmethod
    async def active_plugins(self) -> List[str]:
        pass


class StaticSiteEnvironment(SiteEnvironment):
    """从配置文件读取的站点环境"""

    async def site_url(self) -> str:
        return self.fallback_url()

    async def description(self) -> str:
        return self.fallback_description()

    async def platform_version(self) -> str:
        return self._configured_version('platform_version', self.platform_name)

    async def active_plugins(self) -> List[str]:
        return list(self.site_config.get('active_plugins') or [])


class WordPressSiteEnvironment(SiteEnvironment):
    """从WordPress安装目录及选项表读取的站点环境"""

    def __init__(self, site_config: Dict[str, Any], data_access: DataAccess):
        super().__init__(site_config)
        self.data_access = data_access
        self.wordpress_path = Path(site_config['wordpress_path'])

    async def _option(self, name: str) -> str:
        value = await self.data_access.get_option(name)
        if value is None:
            raise DataAccessError(f"选项 '{name}' 不存在")
        return value

    async def site_url(self) -> str:
        return await self._option('siteurl')

    async def description(self) -> str:
        return await self._option('blogdescription')

    async def platform_version(self) -> str:
        version_file = self.wordpress_path / 'wp-includes' / 'version.php'
        try:
            content = version_file.read_text(encoding='utf-8')
        except OSError as e:
            raise CmsHealthError(f"无法读取版本文件 {version_file}: {e}",
                                 ErrorCode.VALIDATION_ERROR, cause=e)

        match = _WP_VERSION_PATTERN.search(content)
        if not match:
            raise CmsHealthError(f"版本文件中未找到 $wp_version: {version_file}",
                                 ErrorCode.VALIDATION_ERROR)
        return match.group(1)

    async def active_plugins(self) -> List[str]:
        raw = await self.data_access.get_option('active_plugins')
        return parse_serialized_plugins(raw)


def parse_serialized_plugins(raw: Optional[str]) -> List[str]:
    """
    解析选项表中PHP序列化的插件数组

    只识别字符串元素；数组头部声明的数量与解析出的元素不一致时
    以数组头部为准补齐，保证计数正确。

    Raises:
        DataAccessError: 值不是序列化数组
    """
    if raw is None or raw == '':
        return []

    header = _SERIALIZED_ARRAY_PATTERN.match(raw)
    if not header:
        raise DataAccessError(f"active_plugins 不是序列化数组: {raw[:40]!r}")

    declared = int(header.group(1))
    values = _SERIALIZED_STRING_PATTERN.findall(raw)
    # 键和值都可能是字符串，只保留值
    plugins = values[-declared:] if declared and len(values) >= declared else values
    if len(plugins) < declared:
        plugins = plugins + [''] * (declared - len(plugins))
    return plugins


def create_site_environment(site_config: Dict[str, Any],
                            data_access: Optional[DataAccess] = None) -> SiteEnvironment:
    """
    按 ``site.source`` 创建站点环境

    Raises:
        ConfigError: 来源不受支持或缺少数据库配置
    """
    source = site_config.get('source', 'static')
    if source == 'static':
        return StaticSiteEnvironment(site_config)
    if source == 'wordpress':
        if data_access is None:
            raise ConfigError("site.source 为 wordpress 时必须配置 database")
        return WordPressSiteEnvironment(site_config, data_access)
    raise ConfigError(f"不支持的站点来源: '{source}'")
