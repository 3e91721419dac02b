"""自定义异常类和错误处理系统"""

import traceback
from enum import Enum
from typing import Optional, Dict, Any
from datetime import datetime


class ErrorCode(Enum):
    """错误代码枚举"""
    # 通用错误 (1000-1999)
    UNKNOWN_ERROR = 1000
    INITIALIZATION_ERROR = 1001
    VALIDATION_ERROR = 1002

    # 配置错误 (2000-2999)
    CONFIG_FILE_NOT_FOUND = 2000
    CONFIG_PARSE_ERROR = 2001
    CONFIG_VALIDATION_ERROR = 2002

    # 检查组错误 (3000-3999)
    CHECK_GROUP_ERROR = 3000
    CHECK_GROUP_CONFIG_ERROR = 3001
    DUPLICATE_CHECK = 3002

    # 数据访问错误 (4000-4999)
    DATA_ACCESS_ERROR = 4000
    CONNECTION_ERROR = 4001
    QUERY_ERROR = 4002
    TIMEOUT_ERROR = 4003

    # 外部服务错误 (5000-5999)
    EXTERNAL_SERVICE_ERROR = 5000
    EXTERNAL_TIMEOUT = 5001
    INVALID_RESPONSE = 5002


class CmsHealthError(Exception):
    """CMS健康检查系统基础异常类"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        recoverable: bool = True
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause
        self.recoverable = recoverable
        self.timestamp = datetime.now()

    def to_dict(self) -> Dict[str, Any]:
        """将异常转换为字典格式"""
        return {
            'error_code': self.error_code.value,
            'error_name': self.error_code.name,
            'message': self.message,
            'details': self.details,
            'recoverable': self.recoverable,
            'timestamp': self.timestamp.isoformat(),
            'cause': str(self.cause) if self.cause else None,
            'traceback': ''.join(traceback.format_exception(
                type(self.cause), self.cause, self.cause.__traceback__
            )) if self.cause else None
        }

    def format_error(self) -> str:
        """格式化错误信息"""
        error_msg = f"[{self.error_code.name}] {self.message}"
        if self.details:
            details_str = ", ".join([f"{k}={v}" for k, v in self.details.items()])
            error_msg += f" (详情: {details_str})"
        if self.cause:
            error_msg += f" (原因: {str(self.cause)})"
        return error_msg


class ConfigError(CmsHealthError):
    """配置相关异常"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.CONFIG_VALIDATION_ERROR,
        config_path: Optional[str] = None,
        **kwargs
    ):
        details = kwargs.pop('details', None) or {}
        if config_path:
            details['config_path'] = config_path
        kwargs.setdefault('recoverable', False)
        super().__init__(message, error_code, details, **kwargs)


class CheckError(CmsHealthError):
    """检查组相关异常"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.CHECK_GROUP_ERROR,
        group_name: Optional[str] = None,
        **kwargs
    ):
        details = kwargs.pop('details', None) or {}
        if group_name:
            details['group_name'] = group_name
        super().__init__(message, error_code, details, **kwargs)


class DuplicateCheckError(CheckError):
    """检查集合中出现重名检查"""

    def __init__(self, group_name: str, **kwargs):
        super().__init__(
            f"检查 '{group_name}' 已存在于集合中",
            ErrorCode.DUPLICATE_CHECK,
            group_name=group_name,
            recoverable=False,
            **kwargs
        )


class DataAccessError(CmsHealthError):
    """数据库访问异常，检查组会将其转换为失败结果"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.QUERY_ERROR,
        query: Optional[str] = None,
        **kwargs
    ):
        details = kwargs.pop('details', None) or {}
        if query:
            details['query'] = query
        super().__init__(message, error_code, details, **kwargs)


class TransientExternalError(CmsHealthError):
    """外部服务暂时不可用，版本检查按已是最新处理"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.EXTERNAL_SERVICE_ERROR,
        url: Optional[str] = None,
        **kwargs
    ):
        details = kwargs.pop('details', None) or {}
        if url:
            details['url'] = url
        super().__init__(message, error_code, details, **kwargs)
