"""检查组基类"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Generic, List, Optional, TypeVar

from ..models.health_check import Check, CheckResult
from ..services.data_access import DataAccess
from ..services.release_client import PlatformReleaseClient
from ..services.site_environment import SiteEnvironment
from ..utils.log_manager import get_logger

T = TypeVar('T')


@dataclass(frozen=True)
class ProbeResult(Generic[T]):
    """一次探测的结果：要么是值，要么是异常"""
    value: Optional[T] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_text(self) -> str:
        if self.error is None:
            return ''
        return getattr(self.error, 'message', None) or str(self.error)

    @property
    def cause_text(self) -> str:
        """写入报告output的错误描述，有底层异常时使用其原始文本"""
        cause = getattr(self.error, 'cause', None)
        if cause is None:
            return self.error_text
        return str(cause) or type(cause).__name__


async def run_probe(probe: Callable[[], Awaitable[T]]) -> ProbeResult[T]:
    """执行探测，把异常转换为失败的ProbeResult"""
    try:
        return ProbeResult(value=await probe())
    except Exception as e:
        return ProbeResult(error=e)


@dataclass
class CheckContext:
    """检查组共享的宿主能力"""
    site: SiteEnvironment
    data_access: Optional[DataAccess] = None
    release_client: Optional[PlatformReleaseClient] = None
    table_prefix: str = 'wp_'


class BaseCheckGroup(ABC):
    """检查组抽象基类"""

    group_type: str = ''

    def __init__(self, context: CheckContext, config: Optional[Dict[str, Any]] = None):
        """
        初始化检查组

        Args:
            context: 宿主能力（站点环境、数据库、版本查询客户端）
            config: 检查组配置
        """
        self.context = context
        self.config = config or {}
        self.logger = get_logger(f'checker.{self.group_type}')

    @property
    def platform(self) -> str:
        return self.context.site.platform_slug

    @property
    @abstractmethod
    def name(self) -> str:
        """检查组在报告中的名称"""

    def key(self, *parts: str) -> str:
        """组件键，例如 ``wordpress:core:version``"""
        return ':'.join((self.platform,) + parts)

    @abstractmethod
    async def collect(self) -> List[CheckResult]:
        """
        执行全部探测并返回检查结果

        各探测自行把错误转换为失败结果，不向外抛出异常。
        """

    @abstractmethod
    def validate_config(self) -> bool:
        """验证配置参数是否有效"""

    async def run(self) -> Check:
        """执行检查组"""
        self.logger.debug(f"开始执行检查组: {self.name}")
        results = await self.collect()
        self.logger.debug(f"检查组 {self.name} 完成: {[r.status.value for r in results]}")
        return Check(self.name, results)
