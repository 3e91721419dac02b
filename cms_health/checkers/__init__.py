"""检查组模块"""

from .base import BaseCheckGroup, CheckContext, ProbeResult, run_probe
from .factory import (DEFAULT_GROUP_ORDER, CheckGroupFactory, check_group_factory,
                      register_check_group)
from .version_checker import VersionCheckGroup
from .database_checker import DatabaseCheckGroup
from .plugin_checker import PluginCheckGroup

__all__ = ['BaseCheckGroup', 'CheckContext', 'ProbeResult', 'run_probe',
           'DEFAULT_GROUP_ORDER', 'CheckGroupFactory', 'check_group_factory',
           'register_check_group', 'VersionCheckGroup', 'DatabaseCheckGroup',
           'PluginCheckGroup']
