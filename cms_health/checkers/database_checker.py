"""数据库检查组"""

from typing import Any, Dict, List, Optional

from .base import BaseCheckGroup, CheckContext, run_probe
from .factory import register_check_group
from ..models.health_check import CheckResult, CheckResultStatus, ComponentType

CONNECTION_PROBE_SQL = 'SELECT 1'


@register_check_group('database')
class DatabaseCheckGroup(BaseCheckGroup):
    """数据库连通性与数据表检查组

    两项探测互相独立，连接探测失败时仍然执行数据表探测。
    """

    def __init__(self, context: CheckContext, config: Optional[Dict[str, Any]] = None):
        super().__init__(context, config)
        self.table_prefix: str = self.config.get('table_prefix', context.table_prefix)

    @property
    def name(self) -> str:
        return f'{self.platform}:database'

    def validate_config(self) -> bool:
        if self.context.data_access is None:
            self.logger.error("数据库检查组缺少数据访问实现")
            return False
        if not isinstance(self.table_prefix, str) or not self.table_prefix:
            self.logger.error(f"数据表前缀无效: {self.table_prefix!r}")
            return False
        return True

    async def _connection_result(self) -> CheckResult:
        probe = await run_probe(
            lambda: self.context.data_access.scalar_query(CONNECTION_PROBE_SQL))

        if not probe.ok:
            self.logger.warning(f"数据库连接探测异常: {probe.error_text}")
            status = CheckResultStatus.FAIL
            output = f"Database connection error: {probe.cause_text}"
        elif probe.value == '1':
            status = CheckResultStatus.PASS
            output = "Database connection is working properly"
        else:
            self.logger.warning(f"数据库连接探测返回异常值: {probe.value!r}")
            status = CheckResultStatus.FAIL
            output = "Database connection test failed"

        return CheckResult.create(status, self.key('database', 'connection'),
                                  ComponentType.SYSTEM, output=output)

    async def _tables_result(self) -> CheckResult:
        platform = self.context.site.platform_name
        probe = await run_probe(
            lambda: self.context.data_access.list_tables(self.table_prefix))

        if not probe.ok:
            self.logger.warning(f"数据表探测异常: {probe.error_text}")
            table_count = None
            status = CheckResultStatus.FAIL
            output = f"Database tables check error: {probe.cause_text}"
        else:
            table_count = len(probe.value)
            if table_count > 0:
                status = CheckResultStatus.PASS
                output = f"Database contains {table_count} {platform} tables"
            else:
                status = CheckResultStatus.FAIL
                output = f"No {platform} database tables found"

        return CheckResult.create(status, self.key('database', 'tables'),
                                  ComponentType.DATASTORE,
                                  observed_value=table_count, output=output)

    async def collect(self) -> List[CheckResult]:
        return [await self._connection_result(), await self._tables_result()]
