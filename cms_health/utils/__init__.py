"""工具模块"""

from .exceptions import (CmsHealthError, ConfigError, CheckError, DuplicateCheckError,
                         DataAccessError, TransientExternalError)
from .log_manager import LogManager, LogLevel, get_logger, configure_logging, log_manager

__all__ = [
    'CmsHealthError', 'ConfigError', 'CheckError', 'DuplicateCheckError',
    'DataAccessError', 'TransientExternalError',
    'LogManager', 'LogLevel', 'get_logger', 'configure_logging', 'log_manager'
]
