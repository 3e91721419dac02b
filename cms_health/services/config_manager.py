"""配置管理器"""

import os
import yaml
from typing import Dict, Any, Optional
from ..utils.exceptions import ConfigError, ErrorCode
from ..utils.config_validator import ConfigValidator
from ..utils.log_manager import get_logger

REQUIRED_SECTIONS = ['site', 'database']


class ConfigManager:
    """配置管理器，负责YAML配置文件的加载、解析和验证"""

    def __init__(self, config_path: str):
        """
        初始化配置管理器

        Args:
            config_path: 配置文件路径
        """
        self.config_path = config_path
        self.config: Dict[str, Any] = {}
        self.logger = get_logger('config_manager')

    def load_config(self) -> Dict[str, Any]:
        """
        加载YAML配置文件

        Returns:
            Dict[str, Any]: 配置字典

        Raises:
            ConfigError: 配置加载或验证失败
        """
        self.logger.info(f"开始加载配置文件: {self.config_path}")

        if not os.path.exists(self.config_path):
            self.logger.error(f"配置文件不存在: {self.config_path}")
            raise ConfigError(f"配置文件不存在: {self.config_path}",
                              ErrorCode.CONFIG_FILE_NOT_FOUND, config_path=self.config_path)

        try:
            with open(self.config_path, 'r', encoding='utf-8') as file:
                config = yaml.safe_load(file)
        except yaml.YAMLError as e:
            self.logger.error(f"YAML格式错误: {e}")
            raise ConfigError(f"YAML格式错误: {e}", ErrorCode.CONFIG_PARSE_ERROR,
                              config_path=self.config_path, cause=e)
        except PermissionError as e:
            self.logger.error(f"没有权限读取配置文件: {self.config_path}")
            raise ConfigError(f"没有权限读取配置文件: {self.config_path}",
                              config_path=self.config_path, cause=e)
        except OSError as e:
            self.logger.error(f"读取配置文件失败: {e}")
            raise ConfigError(f"读取配置文件失败: {e}", config_path=self.config_path, cause=e)

        if config is None:
            self.logger.error("配置文件为空")
            raise ConfigError("配置文件为空", config_path=self.config_path)

        self._validate_config(config)
        self.logger.info(
            f"配置验证成功，站点来源: {config['site'].get('source', 'static')}, "
            f"数据库: {config['database'].get('host')}:{config['database'].get('port', 3306)}")

        self.config = config
        return self.config

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """
        验证配置文件内容

        Raises:
            ConfigError: 配置验证失败
        """
        if not isinstance(config, dict):
            raise ConfigError("配置文件根节点必须是字典类型")

        for section in REQUIRED_SECTIONS:
            if section not in config:
                raise ConfigError(f"配置文件缺少必需的配置节: {section}")

        if 'global' in config:
            ConfigValidator.validate_global_config(config['global'])

        if 'server' in config:
            ConfigValidator.validate_server_config(config['server'])

        ConfigValidator.validate_site_config(config['site'])
        ConfigValidator.validate_database_config(config['database'])

        if 'checks' in config:
            ConfigValidator.validate_checks_config(config['checks'])

    def get_global_config(self) -> Dict[str, Any]:
        return self.config.get('global') or {}

    def get_server_config(self) -> Dict[str, Any]:
        return self.config.get('server') or {}

    def get_site_config(self) -> Dict[str, Any]:
        return self.config.get('site') or {}

    def get_database_config(self) -> Dict[str, Any]:
        return self.config.get('database') or {}

    def get_checks_config(self) -> Dict[str, Any]:
        return self.config.get('checks') or {}

    def get_check_config(self, group_type: str) -> Optional[Dict[str, Any]]:
        """
        获取指定检查组的配置

        Returns:
            Optional[Dict[str, Any]]: 检查组配置，不存在时返回None
        """
        return self.get_checks_config().get(group_type)
