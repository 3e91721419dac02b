"""健康报告HTTP接口

无论检查结果如何，接口都返回200，健康状态只体现在报告内容中。
"""

from aiohttp import web

from .report_builder import HealthReportBuilder
from ..models.health_check import (Check, CheckCollection, CheckResult, CheckResultStatus,
                                   ComponentType, HealthReport)
from ..utils.log_manager import get_logger

DEFAULT_ROUTE_PREFIX = '/wp-json/cms-health/v1'
HEALTH_PATH = '/health'


class HealthEndpoint:
    """健康报告请求处理器"""

    def __init__(self, builder: HealthReportBuilder):
        self.builder = builder
        self.logger = get_logger('http_server')

    def _fallback_report(self, error: Exception) -> HealthReport:
        site = self.builder.site
        name = f'{site.platform_slug}:report'
        checks = CheckCollection([Check(name, [CheckResult.create(
            CheckResultStatus.FAIL, name, ComponentType.SYSTEM,
            output=f"Health report could not be generated: {error}"
        )])])
        return HealthReport(
            release_id=site.fallback_url(),
            description=site.fallback_description(),
            checks=checks,
            version=self.builder.schema_version
        )

    async def handle_health(self, request: web.Request) -> web.Response:
        """处理 GET 请求，返回JSON格式的健康报告"""
        self.logger.debug(f"收到健康检查请求: {request.remote} {request.path}")
        try:
            report = await self.builder.build()
        except Exception as e:
            self.logger.error(f"生成健康报告失败: {e}", exc_info=True)
            report = self._fallback_report(e)

        return web.json_response(report.to_dict(), status=200)


def register_routes(router: web.UrlDispatcher, endpoint: HealthEndpoint,
                    route_prefix: str = DEFAULT_ROUTE_PREFIX) -> str:
    """
    在路由器上注册健康报告路由

    Returns:
        str: 注册的完整路径
    """
    path = route_prefix.rstrip('/') + HEALTH_PATH
    router.add_get(path, endpoint.handle_health)
    return path


def create_web_app(endpoint: HealthEndpoint,
                   route_prefix: str = DEFAULT_ROUTE_PREFIX) -> web.Application:
    """创建已注册健康报告路由的Web应用"""
    app = web.Application()
    path = register_routes(app.router, endpoint, route_prefix)
    get_logger('http_server').info(f"注册健康报告路由: GET {path}")
    return app
