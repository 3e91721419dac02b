"""版本号比较工具"""

import re
from typing import Union

from packaging.version import InvalidVersion, Version

# 发行版附加的后缀（如 8.1.2-1ubuntu2.14）只保留前面的数字部分
_RELEASE_PREFIX = re.compile(r'^\s*v?(\d+(?:\.\d+)*)')


def parse_version(value: Union[str, Version]) -> Version:
    """
    解析版本号字符串

    Args:
        value: 版本号，例如 "6.9"、"8.2.12"、"8.1.2-1ubuntu2.14"

    Returns:
        Version: 可比较的版本对象

    Raises:
        ValueError: 无法识别的版本号
    """
    if isinstance(value, Version):
        return value

    text = str(value).strip()
    try:
        return Version(text)
    except InvalidVersion:
        match = _RELEASE_PREFIX.match(text)
        if not match:
            raise ValueError(f"无法识别的版本号: {value!r}")
        return Version(match.group(1))


def version_at_least(current: Union[str, Version], minimum: Union[str, Version]) -> bool:
    """判断 current >= minimum"""
    return parse_version(current) >= parse_version(minimum)


def is_valid_version(value) -> bool:
    """判断是否为可识别的版本号"""
    if not isinstance(value, (str, Version)):
        return False
    try:
        parse_version(value)
    except ValueError:
        return False
    return True
