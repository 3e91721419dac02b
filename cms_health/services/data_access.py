"""数据库访问接口及其MySQL实现"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

import aiomysql

from ..utils.exceptions import DataAccessError, ErrorCode
from ..utils.log_manager import get_logger


def escape_like(value: str) -> str:
    """转义LIKE模式中的通配符"""
    return value.replace('\\', '\\\\').replace('_', '\\_').replace('%', '\\%')


class DataAccess(ABC):
    """检查组所需的数据库能力"""

    @abstractmethod
    async def scalar_query(self, sql: str, args: Optional[Sequence[Any]] = None) -> Optional[str]:
        """
        执行查询并返回第一行第一列

        Returns:
            Optional[str]: 文本形式的标量值，无结果时为None

        Raises:
            DataAccessError: 查询失败
        """

    @abstractmethod
    async def list_tables(self, prefix: str) -> List[str]:
        """
        列出名称以指定前缀开头的数据表

        Raises:
            DataAccessError: 查询失败
        """

    @abstractmethod
    async def get_option(self, name: str) -> Optional[str]:
        """
        读取站点选项表中的原始值

        Raises:
            DataAccessError: 查询失败
        """


class MySQLDataAccess(DataAccess):
    """基于aiomysql的数据访问实现，每次调用使用独立连接"""

    def __init__(self, config: Dict[str, Any]):
        """
        Args:
            config: 数据库配置（host、port、username、password、database、
                table_prefix、timeout）
        """
        self.config = config
        self.table_prefix: str = config.get('table_prefix', 'wp_')
        self.logger = get_logger('data_access.mysql')

    def get_timeout(self) -> float:
        return self.config.get('timeout', 5)

    async def _connect(self) -> aiomysql.Connection:
        host = self.config.get('host', 'localhost')
        port = self.config.get('port', 3306)
        self.logger.debug(f"创建MySQL连接: {host}:{port}, timeout={self.get_timeout()}s")

        return await aiomysql.connect(
            host=host,
            port=port,
            user=self.config.get('username', 'root'),
            password=self.config.get('password', ''),
            db=self.config.get('database', ''),
            connect_timeout=self.get_timeout(),
            autocommit=True
        )

    async def _fetch(self, sql: str, args: Optional[Sequence[Any]] = None) -> List[tuple]:
        """执行查询并返回全部行，驱动异常统一包装为DataAccessError"""
        connection = None
        try:
            connection = await self._connect()
            async with connection.cursor() as cursor:
                await cursor.execute(sql, args)
                return list(await cursor.fetchall())
        except aiomysql.OperationalError as e:
            raise DataAccessError(f"MySQL连接失败: {e}", ErrorCode.CONNECTION_ERROR,
                                  query=sql, cause=e)
        except aiomysql.Error as e:
            raise DataAccessError(f"MySQL查询失败: {e}", query=sql, cause=e)
        except asyncio.TimeoutError as e:
            raise DataAccessError("MySQL连接超时", ErrorCode.TIMEOUT_ERROR, query=sql, cause=e)
        except OSError as e:
            raise DataAccessError(f"MySQL网络错误: {e}", ErrorCode.CONNECTION_ERROR,
                                  query=sql, cause=e)
        finally:
            if connection is not None:
                connection.close()

    @staticmethod
    def _as_text(value: Any) -> Optional[str]:
        if value is None:
            return None
        if isinstance(value, (bytes, bytearray)):
            return value.decode('utf-8', errors='replace')
        return str(value)

    async def scalar_query(self, sql: str, args: Optional[Sequence[Any]] = None) -> Optional[str]:
        rows = await self._fetch(sql, args)
        if not rows or not rows[0]:
            return None
        # 与CMS数据库封装保持一致：标量一律以文本返回
        return self._as_text(rows[0][0])

    async def list_tables(self, prefix: str) -> List[str]:
        rows = await self._fetch("SHOW TABLES LIKE %s", (escape_like(prefix) + '%',))
        return [self._as_text(row[0]) for row in rows]

    async def get_option(self, name: str) -> Optional[str]:
        sql = f"SELECT option_value FROM `{self.table_prefix}options` WHERE option_name = %s LIMIT 1"
        return await self.scalar_query(sql, (name,))
