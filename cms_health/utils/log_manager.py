"""
日志管理器模块

为检查组、宿主能力适配器和HTTP服务提供统一的日志记录器，
支持控制台输出、可选的轮转日志文件以及运行时调整日志级别。
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, Dict, Any
from enum import Enum


class LogLevel(Enum):
    """日志级别枚举"""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


class LogManager:
    """
    日志管理器类（单例）

    所有记录器都挂在 ``cms_health`` 命名空间下，保证第三方库
    （aiohttp、aiomysql）的日志不会混入健康报告服务的输出。
    """

    ROOT_NAME = 'cms_health'

    _instance: Optional['LogManager'] = None
    _initialized: bool = False

    def __new__(cls) -> 'LogManager':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._loggers: Dict[str, logging.Logger] = {}
        self._file_format = (
            '%(asctime)s - %(name)s - %(levelname)s - '
            '[%(filename)s:%(lineno)d] - %(message)s'
        )
        self._console_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        self._date_format = '%Y-%m-%d %H:%M:%S'

        self._log_level = LogLevel.INFO
        self._log_file: Optional[str] = None
        self._max_file_size = 10 * 1024 * 1024  # 10MB
        self._backup_count = 5
        self._enable_console = True
        self._console_stream = 'stdout'
        self._enable_file = False

        self._initialized = True

    def configure(self, config: Dict[str, Any]) -> None:
        """
        配置日志管理器

        Args:
            config: 日志配置字典，可选键：
                - log_level: 日志级别 (DEBUG, INFO, WARNING, ERROR, CRITICAL)
                - log_file: 日志文件路径
                - max_file_size: 单个日志文件最大字节数
                - backup_count: 轮转保留的文件数量
                - enable_console: 是否输出到控制台
                - console_stream: 控制台输出流 (stdout, stderr)
                - enable_file: 是否输出到文件

        Raises:
            ValueError: 日志级别无效
        """
        if 'log_level' in config:
            level_str = str(config['log_level']).upper()
            if level_str not in LogLevel.__members__:
                raise ValueError(f"无效的日志级别: {level_str}")
            self._log_level = LogLevel[level_str]

        if config.get('log_file'):
            self._log_file = config['log_file']
            self._enable_file = True

        if 'max_file_size' in config:
            self._max_file_size = config['max_file_size']

        if 'backup_count' in config:
            self._backup_count = config['backup_count']

        if 'enable_console' in config:
            self._enable_console = config['enable_console']

        if 'console_stream' in config:
            if config['console_stream'] not in ('stdout', 'stderr'):
                raise ValueError(f"无效的控制台输出流: {config['console_stream']}")
            self._console_stream = config['console_stream']

        if 'enable_file' in config:
            self._enable_file = config['enable_file']

        # 已创建的记录器按新配置重建处理器
        for name in list(self._loggers):
            self._setup_handlers(self._loggers[name])

    def get_logger(self, name: str) -> logging.Logger:
        """
        获取指定名称的日志记录器

        Args:
            name: 记录器名称，会自动加上 ``cms_health.`` 前缀

        Returns:
            logging.Logger: 配置好的记录器
        """
        if name in self._loggers:
            return self._loggers[name]

        full_name = name if name.startswith(self.ROOT_NAME) else f'{self.ROOT_NAME}.{name}'
        logger = logging.getLogger(full_name)
        self._setup_handlers(logger)

        self._loggers[name] = logger
        return logger

    def _setup_handlers(self, logger: logging.Logger) -> None:
        """为记录器重新安装处理器"""
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        logger.setLevel(self._log_level.value)

        if self._enable_console:
            stream = sys.stderr if self._console_stream == 'stderr' else sys.stdout
            console_handler = logging.StreamHandler(stream)
            console_handler.setLevel(self._log_level.value)
            console_handler.setFormatter(
                logging.Formatter(self._console_format, datefmt=self._date_format)
            )
            logger.addHandler(console_handler)

        if self._enable_file and self._log_file:
            self._ensure_log_directory()
            file_handler = logging.handlers.RotatingFileHandler(
                self._log_file,
                maxBytes=self._max_file_size,
                backupCount=self._backup_count,
                encoding='utf-8'
            )
            file_handler.setLevel(self._log_level.value)
            file_handler.setFormatter(
                logging.Formatter(self._file_format, datefmt=self._date_format)
            )
            logger.addHandler(file_handler)

        logger.propagate = False

    def _ensure_log_directory(self) -> None:
        if self._log_file:
            Path(self._log_file).parent.mkdir(parents=True, exist_ok=True)

    def set_level(self, level: LogLevel) -> None:
        """
        设置全局日志级别

        Args:
            level: 新的日志级别
        """
        self._log_level = level

        for logger in self._loggers.values():
            logger.setLevel(level.value)
            for handler in logger.handlers:
                handler.setLevel(level.value)

    def cleanup(self) -> None:
        """关闭全部处理器"""
        for logger in self._loggers.values():
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
                handler.close()

        self._loggers.clear()


# 全局日志管理器实例
log_manager = LogManager()


def get_logger(name: str) -> logging.Logger:
    """获取日志记录器的便捷函数"""
    return log_manager.get_logger(name)


def configure_logging(config: Dict[str, Any]) -> None:
    """配置日志系统的便捷函数"""
    log_manager.configure(config)
