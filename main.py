#!/usr/bin/env python3
"""
CMS健康报告服务主程序入口

组装配置、日志、数据库访问、站点环境、检查组和HTTP服务，
负责启动与优雅关闭。
"""

import argparse
import asyncio
import logging
import signal
import sys
from typing import Optional, Dict, Any

from aiohttp import web

from cms_health.checkers import CheckContext, check_group_factory
from cms_health.services.config_manager import ConfigManager
from cms_health.services.data_access import MySQLDataAccess
from cms_health.services.http_server import (DEFAULT_ROUTE_PREFIX, HealthEndpoint,
                                             create_web_app)
from cms_health.services.release_client import PlatformReleaseClient
from cms_health.services.report_builder import HealthReportBuilder
from cms_health.services.site_environment import create_site_environment
from cms_health.utils.exceptions import CmsHealthError, ConfigError
from cms_health.utils.log_manager import log_manager, get_logger

# 版本信息
__version__ = "0.1.0"

DEFAULT_HOST = '0.0.0.0'
DEFAULT_PORT = 8080


class HealthReportApp:
    """CMS健康报告服务主应用程序类"""

    def __init__(self, config_path: str, overrides: Optional[Dict[str, Any]] = None):
        """
        Args:
            config_path: 配置文件路径
            overrides: 命令行覆盖项（host、port、log_level、log_file）
        """
        self.config_path = config_path
        self.overrides = {k: v for k, v in (overrides or {}).items() if v is not None}
        self.logger: Optional[logging.Logger] = None
        self.is_running = False
        self.shutdown_event = asyncio.Event()

        self.config_manager: Optional[ConfigManager] = None
        self.builder: Optional[HealthReportBuilder] = None
        self.web_app: Optional[web.Application] = None
        self.runner: Optional[web.AppRunner] = None

    def initialize(self):
        """初始化应用程序组件

        Raises:
            ConfigError: 配置无效
            CmsHealthError: 检查组创建失败
        """
        self.config_manager = ConfigManager(self.config_path)
        self.config_manager.load_config()

        self._configure_logging(self.config_manager.get_global_config())
        self.logger = get_logger('main')
        self.logger.info("开始初始化CMS健康报告服务")

        database_config = self.config_manager.get_database_config()
        data_access = MySQLDataAccess(database_config)
        site = create_site_environment(self.config_manager.get_site_config(), data_access)

        checks_config = self.config_manager.get_checks_config()
        context = CheckContext(
            site=site,
            data_access=data_access,
            release_client=PlatformReleaseClient(checks_config.get('version')),
            table_prefix=database_config.get('table_prefix', 'wp_')
        )
        groups = check_group_factory.create_default_groups(context, checks_config)
        self.builder = HealthReportBuilder(groups, site)

        route_prefix = self.config_manager.get_server_config().get(
            'route_prefix', DEFAULT_ROUTE_PREFIX)
        self.web_app = create_web_app(HealthEndpoint(self.builder), route_prefix)

        self.logger.info(f"应用程序组件初始化完成，检查组: {[g.name for g in groups]}")

    def _configure_logging(self, global_config: Dict[str, Any]):
        """配置日志系统"""
        log_file = self.overrides.get('log_file', global_config.get('log_file'))
        log_config = {
            'log_level': self.overrides.get('log_level', global_config.get('log_level', 'INFO')),
            'enable_console': True,
            'enable_file': bool(log_file)
        }

        if log_file:
            log_config['log_file'] = log_file
            log_config['max_file_size'] = global_config.get('max_log_size', 10 * 1024 * 1024)
            log_config['backup_count'] = global_config.get('log_backup_count', 5)

        log_manager.configure(log_config)

    def get_bind_address(self):
        server_config = self.config_manager.get_server_config()
        host = self.overrides.get('host', server_config.get('host', DEFAULT_HOST))
        port = self.overrides.get('port', server_config.get('port', DEFAULT_PORT))
        return host, port

    async def start(self):
        """启动HTTP服务并等待关闭信号"""
        if self.is_running:
            self.logger.warning("应用程序已经在运行")
            return

        try:
            self.is_running = True
            host, port = self.get_bind_address()

            self.runner = web.AppRunner(self.web_app)
            await self.runner.setup()
            site = web.TCPSite(self.runner, host, port)
            await site.start()
            self.logger.info(f"CMS健康报告服务已启动: http://{host}:{port}")

            await self.shutdown_event.wait()

        except Exception as e:
            self.logger.error(f"应用程序运行异常: {e}", exc_info=True)
            raise
        finally:
            await self.stop()

    async def stop(self):
        """停止应用程序"""
        if not self.is_running:
            return

        self.logger.info("正在停止CMS健康报告服务...")
        self.is_running = False

        if self.runner:
            await self.runner.cleanup()
            self.runner = None

        self.logger.info("CMS健康报告服务已停止")
        log_manager.cleanup()

    def shutdown(self):
        """触发应用程序关闭"""
        if self.logger:
            self.logger.info("收到关闭信号")
        self.shutdown_event.set()


def create_argument_parser() -> argparse.ArgumentParser:
    """创建命令行参数解析器"""
    parser = argparse.ArgumentParser(
        prog='cms-health',
        description='CMS健康报告服务 - 以CMS Health Checks格式报告站点健康状态',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
示例用法:
  %(prog)s config.yaml                    # 启动HTTP服务
  %(prog)s --validate config.yaml         # 验证配置文件格式
  %(prog)s --check-once config.yaml       # 生成一次报告并输出JSON
  %(prog)s --port 9000 config.yaml        # 覆盖监听端口

配置文件格式请参考 config/example.yaml
        """
    )

    parser.add_argument('config_file', nargs='?', help='YAML配置文件路径')

    parser.add_argument('--version', '-v', action='version',
                        version=f'%(prog)s {__version__}')

    parser.add_argument('--validate', action='store_true', help='验证配置文件格式并退出')

    parser.add_argument('--check-once', action='store_true',
                        help='生成一次健康报告，输出JSON后退出')

    parser.add_argument('--host', help='监听地址（覆盖配置文件设置）')

    parser.add_argument('--port', type=int, help='监听端口（覆盖配置文件设置）')

    parser.add_argument('--log-level',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help='设置日志级别（覆盖配置文件设置）')

    parser.add_argument('--log-file', help='日志文件路径（覆盖配置文件设置）')

    return parser


def validate_config_file(config_path: str) -> bool:
    """验证配置文件

    Returns:
        验证是否成功
    """
    try:
        print(f"正在验证配置文件: {config_path}")
        config = ConfigManager(config_path).load_config()

        site_config = config['site']
        database_config = config['database']
        print("✅ 配置文件验证成功!")
        print(f"   - 站点来源: {site_config.get('source', 'static')}")
        print(f"   - 平台: {site_config.get('platform', 'WordPress')}")
        print(f"   - 数据库: {database_config.get('host')}:{database_config.get('port', 3306)}"
              f" (前缀 {database_config.get('table_prefix', 'wp_')})")
        return True

    except ConfigError as e:
        print(f"❌ 配置文件验证失败: {e}")
        return False


async def check_once(config_path: str, overrides: Optional[Dict[str, Any]] = None) -> bool:
    """生成一次健康报告并打印

    Returns:
        报告中没有失败项时返回True
    """
    # 标准输出只留给报告JSON
    log_manager.configure({'console_stream': 'stderr'})

    try:
        app = HealthReportApp(config_path, overrides)
        app.initialize()
        report = await app.builder.build()
    except CmsHealthError as e:
        print(f"❌ 生成健康报告失败: {e}", file=sys.stderr)
        return False

    print(report.to_json(indent=2))
    return not report.has_failures()


async def serve(app: HealthReportApp):
    """注册信号处理并运行服务"""
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, app.shutdown)
        except NotImplementedError:
            # Windows事件循环不支持add_signal_handler
            signal.signal(sig, lambda signum, frame: app.shutdown())

    await app.start()


def main(argv=None) -> int:
    """主函数，返回进程退出码"""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.config_file:
        parser.print_help()
        return 1

    overrides = {
        'host': args.host,
        'port': args.port,
        'log_level': args.log_level,
        'log_file': args.log_file,
    }

    if args.validate:
        return 0 if validate_config_file(args.config_file) else 1

    if args.check_once:
        return 0 if asyncio.run(check_once(args.config_file, overrides)) else 1

    try:
        app = HealthReportApp(args.config_file, overrides)
        app.initialize()
        print(f"CMS健康报告服务 v{__version__} 已启动")
        print(f"配置文件: {args.config_file}")
        print("按 Ctrl+C 停止程序")
        asyncio.run(serve(app))
    except KeyboardInterrupt:
        print("\n用户中断程序")
    except ConfigError as e:
        print(f"配置错误: {e}", file=sys.stderr)
        return 1
    except CmsHealthError as e:
        print(f"CMS健康报告服务错误: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"HTTP服务启动失败: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
