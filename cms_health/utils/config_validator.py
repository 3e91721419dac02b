"""配置验证工具"""

from typing import Dict, Any

from .exceptions import ConfigError
from .versioning import is_valid_version

SUPPORTED_SITE_SOURCES = ['static', 'wordpress']
VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def _validate_version_string(value: Any, field: str) -> None:
    """版本号必须写成带引号的字符串，YAML会把 7.10 解析成浮点数 7.1"""
    if not isinstance(value, str):
        raise ConfigError(f"{field} 必须是字符串，请给版本号加引号: {value!r}")
    if not is_valid_version(value):
        raise ConfigError(f"{field} 无效: {value}")


def _validate_positive_number(value: Any, field: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{field} 必须是正数")


class ConfigValidator:
    """配置验证器"""

    @staticmethod
    def validate_global_config(global_config: Dict[str, Any]) -> None:
        """
        验证全局配置

        Args:
            global_config: 全局配置

        Raises:
            ConfigError: 配置验证失败
        """
        if not isinstance(global_config, dict):
            raise ConfigError("全局配置必须是字典类型")

        log_level = global_config.get('log_level')
        if log_level is not None and str(log_level).upper() not in VALID_LOG_LEVELS:
            raise ConfigError(f"log_level 必须是以下值之一: {VALID_LOG_LEVELS}")

        log_file = global_config.get('log_file')
        if log_file is not None and not isinstance(log_file, str):
            raise ConfigError("log_file 必须是字符串")

    @staticmethod
    def validate_server_config(server_config: Dict[str, Any]) -> None:
        """
        验证HTTP服务配置

        Args:
            server_config: 服务配置

        Raises:
            ConfigError: 配置验证失败
        """
        if not isinstance(server_config, dict):
            raise ConfigError("server配置必须是字典类型")

        port = server_config.get('port')
        if port is not None:
            if not isinstance(port, int) or isinstance(port, bool) or not 0 < port <= 65535:
                raise ConfigError(f"server.port 无效: {port}")

        route_prefix = server_config.get('route_prefix')
        if route_prefix is not None:
            if not isinstance(route_prefix, str) or not route_prefix.startswith('/'):
                raise ConfigError("server.route_prefix 必须是以 '/' 开头的字符串")

    @staticmethod
    def validate_site_config(site_config: Dict[str, Any]) -> None:
        """
        验证站点配置

        Args:
            site_config: 站点配置

        Raises:
            ConfigError: 配置验证失败
        """
        if not isinstance(site_config, dict):
            raise ConfigError("site配置必须是字典类型")

        source = site_config.get('source', 'static')
        if source not in SUPPORTED_SITE_SOURCES:
            raise ConfigError(
                f"site.source '{source}' 不受支持。支持的来源: {SUPPORTED_SITE_SOURCES}")

        if source == 'static' and not site_config.get('url'):
            raise ConfigError("site.source 为 static 时必须配置 site.url")

        if source == 'wordpress' and not site_config.get('wordpress_path'):
            raise ConfigError("site.source 为 wordpress 时必须配置 site.wordpress_path")

        plugins = site_config.get('active_plugins')
        if plugins is not None and not isinstance(plugins, list):
            raise ConfigError("site.active_plugins 必须是列表类型")

        for field in ('platform_version', 'runtime_version'):
            if site_config.get(field) is not None:
                _validate_version_string(site_config[field], f'site.{field}')

    @staticmethod
    def validate_database_config(database_config: Dict[str, Any]) -> None:
        """
        验证数据库配置

        Args:
            database_config: 数据库配置

        Raises:
            ConfigError: 配置验证失败
        """
        if not isinstance(database_config, dict):
            raise ConfigError("database配置必须是字典类型")

        if 'host' not in database_config:
            raise ConfigError("database 缺少必需的配置项: host")

        port = database_config.get('port', 3306)
        if not isinstance(port, int) or isinstance(port, bool) or not 0 < port <= 65535:
            raise ConfigError(f"database.port 无效: {port}")

        prefix = database_config.get('table_prefix', 'wp_')
        if not isinstance(prefix, str) or not prefix:
            raise ConfigError("database.table_prefix 必须是非空字符串")

        timeout = database_config.get('timeout')
        if timeout is not None:
            _validate_positive_number(timeout, 'database.timeout')

    @staticmethod
    def validate_checks_config(checks_config: Dict[str, Any]) -> None:
        """
        验证检查组配置

        Args:
            checks_config: 检查组配置

        Raises:
            ConfigError: 配置验证失败
        """
        if not isinstance(checks_config, dict):
            raise ConfigError("checks配置必须是字典类型")

        version_config = checks_config.get('version', {})
        if not isinstance(version_config, dict):
            raise ConfigError("checks.version 必须是字典类型")

        min_version = version_config.get('min_runtime_version')
        if min_version is not None:
            _validate_version_string(min_version, 'checks.version.min_runtime_version')

        timeout = version_config.get('timeout')
        if timeout is not None:
            _validate_positive_number(timeout, 'checks.version.timeout')

        feed_url = version_config.get('release_feed_url')
        if feed_url is not None:
            if not isinstance(feed_url, str) or not feed_url.startswith(('http://', 'https://')):
                raise ConfigError(f"checks.version.release_feed_url 无效: {feed_url}")
