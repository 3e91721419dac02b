"""平台最新版本查询客户端"""

import asyncio
import json
from typing import Any, Dict, Optional

import aiohttp

from ..utils.exceptions import ErrorCode, TransientExternalError
from ..utils.log_manager import get_logger

DEFAULT_RELEASE_FEED_URL = 'https://api.wordpress.org/core/version-check/1.7/'


class PlatformReleaseClient:
    """查询平台官方发布源，获取最新版本号

    不做重试，单次请求只受超时限制。
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Args:
            config: 版本检查配置（release_feed_url、timeout）
        """
        self.config = config or {}
        self.url: str = self.config.get('release_feed_url', DEFAULT_RELEASE_FEED_URL)
        self.logger = get_logger('release_client')

    def get_timeout(self) -> float:
        return self.config.get('timeout', 10)

    async def fetch_latest_version(self) -> Optional[str]:
        """
        获取最新发布版本

        Returns:
            Optional[str]: ``offers[0].version``，响应中缺少该字段时为None

        Raises:
            TransientExternalError: 网络错误、超时、非200状态码或响应不是JSON
        """
        timeout = aiohttp.ClientTimeout(total=self.get_timeout())

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(self.url) as response:
                    if response.status != 200:
                        raise TransientExternalError(
                            f"版本检查服务返回状态码 {response.status}",
                            ErrorCode.INVALID_RESPONSE,
                            url=self.url
                        )
                    body = await response.text()
        except aiohttp.ClientError as e:
            raise TransientExternalError(f"HTTP客户端错误: {e}", url=self.url, cause=e)
        except asyncio.TimeoutError as e:
            raise TransientExternalError("版本检查请求超时", ErrorCode.EXTERNAL_TIMEOUT,
                                         url=self.url, cause=e)

        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise TransientExternalError(f"版本检查响应不是有效的JSON: {e}",
                                         ErrorCode.INVALID_RESPONSE, url=self.url, cause=e)

        version = self._extract_version(data)
        self.logger.debug(f"发布源最新版本: {version}")
        return version

    @staticmethod
    def _extract_version(data: Any) -> Optional[str]:
        if not isinstance(data, dict):
            return None
        offers = data.get('offers')
        if not isinstance(offers, list) or not offers or not isinstance(offers[0], dict):
            return None
        version = offers[0].get('version')
        return str(version) if version is not None else None
