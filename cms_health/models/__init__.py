"""数据模型模块"""

from .health_check import (SCHEMA_VERSION, CheckResultStatus, ComponentType, CheckResult,
                           Check, CheckCollection, HealthReport, component_id)

__all__ = ['SCHEMA_VERSION', 'CheckResultStatus', 'ComponentType', 'CheckResult',
           'Check', 'CheckCollection', 'HealthReport', 'component_id']
