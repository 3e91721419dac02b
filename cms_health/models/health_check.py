"""健康报告相关的数据模型

字段名与 CMS Health Checks JSON 结构一一对应，``to_dict`` 负责转换为
驼峰命名的线上格式，``from_dict`` 负责解析回来。
"""

import hashlib
import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from ..utils.exceptions import DuplicateCheckError

SCHEMA_VERSION = '1'


def now() -> datetime:
    """带本地时区的当前时间"""
    return datetime.now().astimezone()


def component_id(key: str) -> str:
    """由可读的组件键生成稳定标识（md5十六进制）"""
    return hashlib.md5(key.encode('utf-8')).hexdigest()


def _format_time(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _parse_time(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value is not None else None


class CheckResultStatus(Enum):
    """单项检查结果状态"""
    PASS = 'pass'
    WARN = 'warn'
    FAIL = 'fail'
    INFO = 'info'


class ComponentType(Enum):
    """被检查组件所在层级"""
    SYSTEM = 'system'
    DATASTORE = 'datastore'
    COMPONENT = 'component'


@dataclass(frozen=True)
class CheckResult:
    """单项检查结果，创建后不可修改"""
    status: CheckResultStatus
    component_id: str
    component_type: ComponentType
    time: datetime = field(default_factory=now)
    observed_value: Any = None
    affected_since: Optional[datetime] = None
    output: Optional[str] = None

    @classmethod
    def create(cls, status: CheckResultStatus, key: str, component_type: ComponentType,
               observed_value: Any = None, output: Optional[str] = None,
               affected_since: Optional[datetime] = None) -> 'CheckResult':
        """按组件键创建检查结果，观测时间取当前时间"""
        return cls(
            status=status,
            component_id=component_id(key),
            component_type=component_type,
            time=now(),
            observed_value=observed_value,
            affected_since=affected_since,
            output=output
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'status': self.status.value,
            'componentId': self.component_id,
            'componentType': self.component_type.value,
            'time': _format_time(self.time),
            'observedValue': self.observed_value,
            'affectedSince': _format_time(self.affected_since),
            'output': self.output,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CheckResult':
        return cls(
            status=CheckResultStatus(data['status']),
            component_id=data['componentId'],
            component_type=ComponentType(data['componentType']),
            time=_parse_time(data['time']),
            observed_value=data.get('observedValue'),
            affected_since=_parse_time(data.get('affectedSince')),
            output=data.get('output')
        )


@dataclass
class Check:
    """同一关注点下的一组检查结果"""
    name: str
    results: List[CheckResult] = field(default_factory=list)

    def statuses(self) -> List[CheckResultStatus]:
        return [result.status for result in self.results]


class CheckCollection:
    """按名称索引、保持插入顺序的检查集合"""

    def __init__(self, checks: Optional[List[Check]] = None):
        self._checks: Dict[str, Check] = {}
        for check in checks or []:
            self.add_check(check)

    def add_check(self, check: Check) -> None:
        """
        添加检查

        Raises:
            DuplicateCheckError: 同名检查已存在
        """
        if check.name in self._checks:
            raise DuplicateCheckError(check.name)
        self._checks[check.name] = check

    def get_check(self, name: str) -> Optional[Check]:
        return self._checks.get(name)

    def names(self) -> List[str]:
        return list(self._checks.keys())

    def all_results(self) -> List[CheckResult]:
        return [result for check in self._checks.values() for result in check.results]

    def __contains__(self, name: object) -> bool:
        return name in self._checks

    def __iter__(self) -> Iterator[Check]:
        return iter(self._checks.values())

    def __len__(self) -> int:
        return len(self._checks)

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            name: [result.to_dict() for result in check.results]
            for name, check in self._checks.items()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, List[Dict[str, Any]]]) -> 'CheckCollection':
        return cls([
            Check(name, [CheckResult.from_dict(item) for item in results])
            for name, results in data.items()
        ])


@dataclass
class HealthReport:
    """一次请求生成的完整健康报告"""
    release_id: str
    description: str
    checks: CheckCollection
    time: datetime = field(default_factory=now)
    version: str = SCHEMA_VERSION

    def has_failures(self) -> bool:
        return any(result.status == CheckResultStatus.FAIL
                   for result in self.checks.all_results())

    def to_dict(self) -> Dict[str, Any]:
        return {
            'version': self.version,
            'releaseId': self.release_id,
            'description': self.description,
            'time': _format_time(self.time),
            'checks': self.checks.to_dict(),
        }

    def to_json(self, **kwargs) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, **kwargs)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HealthReport':
        return cls(
            release_id=data['releaseId'],
            description=data['description'],
            checks=CheckCollection.from_dict(data.get('checks', {})),
            time=_parse_time(data['time']) if data.get('time') else now(),
            version=data['version']
        )

    @classmethod
    def from_json(cls, text: str) -> 'HealthReport':
        return cls.from_dict(json.loads(text))
