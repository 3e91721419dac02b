"""
日志管理器测试模块
"""

import logging
import logging.handlers
import os
import sys
import tempfile
import pytest

from cms_health.utils.log_manager import LogManager, LogLevel, get_logger, log_manager


class TestLogManager:
    """日志管理器测试类"""

    def setup_method(self):
        """每个测试方法前重置单例"""
        LogManager._instance = None
        LogManager._initialized = False

    def test_singleton_pattern(self):
        """测试单例模式"""
        assert LogManager() is LogManager()

    def test_default_configuration(self):
        """测试默认配置"""
        manager = LogManager()

        assert manager._log_level == LogLevel.INFO
        assert manager._log_file is None
        assert manager._enable_console is True
        assert manager._enable_file is False

    def test_configure_log_level(self):
        """测试日志级别配置"""
        manager = LogManager()

        manager.configure({'log_level': 'debug'})
        assert manager._log_level == LogLevel.DEBUG

        with pytest.raises(ValueError, match="无效的日志级别"):
            manager.configure({'log_level': 'INVALID'})

    def test_logger_namespaced(self):
        """测试记录器位于cms_health命名空间"""
        manager = LogManager()

        logger = manager.get_logger('checker.version')

        assert logger.name == 'cms_health.checker.version'
        assert logger.propagate is False
        assert manager.get_logger('checker.version') is logger

    def test_configure_rebuilds_existing_handlers(self):
        """测试重新配置时更新已有记录器"""
        manager = LogManager()
        logger = manager.get_logger('reconfigure')

        with tempfile.TemporaryDirectory() as temp_dir:
            log_file = os.path.join(temp_dir, 'logs', 'cms-health.log')
            manager.configure({'log_level': 'WARNING', 'log_file': log_file})

            assert logger.level == logging.WARNING
            assert any(isinstance(h, logging.handlers.RotatingFileHandler)
                       for h in logger.handlers)

            logger.warning("写入文件")
            assert os.path.exists(log_file)
            manager.cleanup()

    def test_console_stream(self):
        """测试控制台输出流切换到stderr"""
        manager = LogManager()
        logger = manager.get_logger('stream')

        manager.configure({'console_stream': 'stderr'})

        stream_handlers = [h for h in logger.handlers if type(h) is logging.StreamHandler]
        assert stream_handlers[0].stream is sys.stderr

        with pytest.raises(ValueError, match="无效的控制台输出流"):
            manager.configure({'console_stream': 'tty'})
        manager.cleanup()

    def test_set_level(self):
        """测试设置全局日志级别"""
        manager = LogManager()
        logger = manager.get_logger('level')

        manager.set_level(LogLevel.ERROR)

        assert logger.level == logging.ERROR
        assert all(h.level == logging.ERROR for h in logger.handlers)

    def test_cleanup(self):
        """测试清理"""
        manager = LogManager()
        logger = manager.get_logger('cleanup')

        manager.cleanup()

        assert logger.handlers == []

        # 清理后再次获取会重新安装处理器
        assert manager.get_logger('cleanup').handlers


def test_get_logger_uses_global_manager():
    """测试便捷函数"""
    logger = get_logger('global-test')
    assert logger is log_manager.get_logger('global-test')
