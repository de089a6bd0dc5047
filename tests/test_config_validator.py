"""
配置验证器测试
"""
import pytest
import os
from unittest.mock import patch

from cert_expiry_checker.services.config_validator import ConfigValidator


class TestConfigValidator:
    """配置验证器测试类"""

    def setup_method(self):
        """测试前准备"""
        self.validator = ConfigValidator()

    @patch.dict(os.environ, {
        'DOMAINS': 'example.com,example.org:8443',
        'CONNECT_TIMEOUT': '5',
        'LOG_LEVEL': 'info',
        'MAX_WORKERS': '4',
        'SNS_TOPIC_ARN': 'arn:aws:sns:us-east-1:123456789012:cert-alerts'
    }, clear=True)
    def test_validate_all_success(self):
        """测试完整配置验证通过"""
        result = self.validator.validate_all_configurations()

        assert result['is_valid'] is True
        assert result['errors'] == []
        assert result['configurations']['targets']['total_targets'] == 2
        assert result['configurations']['timeout']['timeout'] == 5.0
        assert result['configurations']['sns']['arn_format_valid'] is True

    @patch.dict(os.environ, {}, clear=True)
    def test_validate_all_defaults(self):
        """测试未设置任何变量时只有警告"""
        result = self.validator.validate_all_configurations()

        assert result['is_valid'] is True
        assert any("DOMAINS" in warning for warning in result['warnings'])
        assert any("SNS_TOPIC_ARN" in warning for warning in result['warnings'])

    @patch.dict(os.environ, {}, clear=True)
    def test_targets_required(self):
        """测试Lambda入口要求DOMAINS"""
        result = ConfigValidator(require_targets=True).validate_all_configurations()

        assert result['is_valid'] is False
        assert "DOMAINS环境变量为空" in result['errors']

    @pytest.mark.parametrize("value", ["abc", "0", "-3"])
    def test_invalid_timeout(self, value):
        with patch.dict(os.environ, {'CONNECT_TIMEOUT': value}):
            result = self.validator.validate_timeout_configuration()

        assert result['is_valid'] is False

    @patch.dict(os.environ, {'CONNECT_TIMEOUT': '120'})
    def test_long_timeout_warning(self):
        result = self.validator.validate_timeout_configuration()

        assert result['is_valid'] is True
        assert result['warnings']

    @patch.dict(os.environ, {'LOG_LEVEL': 'LOUD'})
    def test_invalid_log_level(self):
        assert self.validator.validate_log_level_configuration()['is_valid'] is False

    @pytest.mark.parametrize("value", ["0", "two", "-1"])
    def test_invalid_max_workers(self, value):
        with patch.dict(os.environ, {'MAX_WORKERS': value}):
            assert self.validator.validate_max_workers_configuration()['is_valid'] is False

    @patch.dict(os.environ, {'SNS_TOPIC_ARN': 'arn:aws:sns:us-east-1:123:bad topic'})
    def test_invalid_sns_arn(self):
        """测试SNS主题ARN格式无效"""
        result = self.validator.validate_sns_configuration()

        assert result['is_valid'] is False
        assert result['arn_format_valid'] is False

    @patch.dict(os.environ, {
        'DOMAINS': 'example.com',
        'SNS_TOPIC_ARN': 'arn:aws:sns:us-east-1:123456789012:cert-alerts'
    }, clear=True)
    def test_configuration_summary_masks_arn(self):
        """测试配置摘要隐藏账号"""
        summary = self.validator.get_configuration_summary()

        assert "配置验证通过" in summary
        assert "DOMAINS: example.com" in summary
        assert "123456789012" not in summary
