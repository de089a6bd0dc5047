"""
日志服务测试
"""
import pytest
import os
import logging
from unittest.mock import patch
from io import StringIO

from cert_expiry_checker.models import HostOutcome, CertificateView
from cert_expiry_checker.services.logger import LoggerService, mask_value


class TestLoggerService:
    """日志服务测试类"""

    def setup_method(self):
        """测试前准备"""
        self.logger_service = LoggerService(logger_name="test_logger")

        # 捕获日志输出
        self.log_stream = StringIO()
        handler = logging.StreamHandler(self.log_stream)
        handler.setFormatter(logging.Formatter('%(levelname)s - %(message)s'))

        self.logger_service.logger.handlers.clear()
        self.logger_service.logger.addHandler(handler)
        self.logger_service.logger.setLevel(logging.DEBUG)

    def teardown_method(self):
        """测试后清理"""
        self.logger_service.reset_stats()

    def get_log_output(self) -> str:
        return self.log_stream.getvalue()

    @patch.dict(os.environ, {}, clear=True)
    def test_init_default_config(self):
        """测试默认配置初始化"""
        service = LoggerService(logger_name="default_logger")

        assert service.log_level == "WARNING"
        assert service.logger.level == logging.WARNING
        assert service.logger.propagate is False

    @patch.dict(os.environ, {'LOG_LEVEL': 'DEBUG'})
    def test_init_with_env_log_level(self):
        service = LoggerService(logger_name="env_logger")

        assert service.log_level == "DEBUG"
        assert service.logger.level == logging.DEBUG

    def test_handler_not_duplicated(self):
        """测试重复初始化不会重复添加处理器"""
        LoggerService(logger_name="dup_logger")
        service = LoggerService(logger_name="dup_logger", log_level="INFO")

        assert len(service.logger.handlers) == 1
        assert service.logger.handlers[0].level == logging.INFO

    def test_log_host_outcomes(self):
        """测试记录目标结果与统计"""
        cert = CertificateView((), "x", None, None)
        self.logger_service.log_check_start(3)
        self.logger_service.log_host_outcome(HostOutcome(target="a:443", unexpired=[cert]))
        self.logger_service.log_host_outcome(HostOutcome(target="b:443", expired=[cert, cert]))
        self.logger_service.log_host_outcome(
            HostOutcome(target="c:443", error="refused", error_type="ConnectionRefusedError")
        )
        self.logger_service.log_check_end()

        summary = self.logger_service.get_execution_summary()
        assert summary['total_targets'] == 3
        assert summary['connected_hosts'] == 2
        assert summary['failed_hosts'] == 1
        assert summary['expired_certificates'] == 2
        assert summary['problem_count'] == 3
        assert summary['errors'][0]['target'] == "c:443"
        assert summary['duration_seconds'] >= 0

        output = self.get_log_output()
        assert "INFO - 目标检查失败 - c:443" in output
        assert "INFO - 发现无效证书 - b:443" in output
        assert "INFO - 证书正常 - a:443" in output

    def test_log_error(self):
        self.logger_service.log_error("a:443", RuntimeError("boom"))

        assert "RuntimeError: boom" in self.get_log_output()
        assert self.logger_service.get_execution_summary()['error_count'] == 1

    def test_log_configuration_masks_sensitive_values(self):
        """测试配置日志隐藏敏感信息"""
        self.logger_service.log_configuration_info({
            'sns_topic_arn': 'arn:aws:sns:us-east-1:123456789012:alerts',
            'api_token': 'abcdef',
            'domains': 'example.com'
        })

        output = self.get_log_output()
        assert "123456789012" not in output
        assert "arn:aws:sns:us-east-1:***:alerts" in output
        assert "abc***" in output
        assert "example.com" in output

    def test_reset_stats(self):
        self.logger_service.log_check_start(5)
        self.logger_service.reset_stats()

        assert self.logger_service.get_execution_summary()['total_targets'] == 0


class TestMaskValue:
    """敏感值隐藏测试类"""

    def test_mask_short_value(self):
        assert mask_value("ab") == "***"

    def test_mask_invalid_arn(self):
        assert mask_value("arn:short") == "***"
