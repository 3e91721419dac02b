"""检查组工厂"""

from typing import Any, Dict, List, Optional, Type

from .base import BaseCheckGroup, CheckContext
from ..utils.exceptions import CheckError, ErrorCode

# 报告中检查组的固定顺序
DEFAULT_GROUP_ORDER = ['version', 'database', 'plugins']


class CheckGroupFactory:
    """检查组工厂类，负责注册和创建检查组"""

    def __init__(self):
        self._groups: Dict[str, Type[BaseCheckGroup]] = {}

    def register_group(self, group_type: str, group_class: Type[BaseCheckGroup]):
        """
        注册检查组类

        Raises:
            CheckError: 注册失败
        """
        if not issubclass(group_class, BaseCheckGroup):
            raise CheckError(f"检查组类 {group_class.__name__} 必须继承自 BaseCheckGroup")

        if group_type in self._groups:
            raise CheckError(f"检查组类型 '{group_type}' 已经注册")

        group_class.group_type = group_type
        self._groups[group_type] = group_class

    def create_group(self, group_type: str, context: CheckContext,
                     config: Optional[Dict[str, Any]] = None) -> BaseCheckGroup:
        """
        创建检查组实例

        Raises:
            CheckError: 类型不支持或配置验证失败
        """
        if not self.is_type_supported(group_type):
            raise CheckError(f"不支持的检查组类型: '{group_type}'，"
                             f"支持的类型: {self.get_supported_types()}")

        group = self._groups[group_type](context, config or {})
        if not group.validate_config():
            raise CheckError(f"检查组 '{group_type}' 的配置验证失败",
                             ErrorCode.CHECK_GROUP_CONFIG_ERROR, group_name=group.name)
        return group

    def create_default_groups(self, context: CheckContext,
                              checks_config: Optional[Dict[str, Any]] = None) -> List[BaseCheckGroup]:
        """按固定顺序创建全部检查组"""
        checks_config = checks_config or {}
        return [
            self.create_group(group_type, context, checks_config.get(group_type))
            for group_type in DEFAULT_GROUP_ORDER
        ]

    def get_supported_types(self) -> list:
        return list(self._groups.keys())

    def is_type_supported(self, group_type: str) -> bool:
        return group_type in self._groups


# 全局工厂实例
check_group_factory = CheckGroupFactory()


def register_check_group(group_type: str):
    """
    装饰器：注册检查组类

    Args:
        group_type: 检查组类型名称
    """
    def decorator(group_class: Type[BaseCheckGroup]):
        check_group_factory.register_group(group_type, group_class)
        return group_class

    return decorator
