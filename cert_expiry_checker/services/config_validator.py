"""
配置验证服务
"""
import os
import re
import logging
from typing import Dict, Any

from .logger import mask_value
from .target_config import TargetConfigManager


SNS_ARN_PATTERN = r'^arn:aws:sns:[a-z0-9-]+:\d{12}:[a-zA-Z0-9_-]+$'
LOG_LEVELS = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}


class ConfigValidator:
    """配置验证器"""

    def __init__(self, require_targets: bool = False):
        """
        初始化配置验证器

        Args:
            require_targets: 是否要求 DOMAINS 非空（Lambda 入口需要）
        """
        self.require_targets = require_targets
        self.logger = logging.getLogger(__name__)

        self.optional_env_vars = {
            'DOMAINS': '目标列表（逗号分隔）',
            'CONNECT_TIMEOUT': '连接超时（秒）',
            'LOG_LEVEL': '日志级别',
            'MAX_WORKERS': '并发上限',
            'SNS_TOPIC_ARN': 'SNS主题ARN',
            'AWS_REGION': 'AWS区域'
        }

    def validate_all_configurations(self) -> Dict[str, Any]:
        """
        验证所有配置

        Returns:
            Dict[str, Any]: 验证结果
        """
        validation_result = {
            'is_valid': True,
            'errors': [],
            'warnings': [],
            'configurations': {}
        }

        checks = {
            'targets': self.validate_targets_configuration(),
            'timeout': self.validate_timeout_configuration(),
            'log_level': self.validate_log_level_configuration(),
            'max_workers': self.validate_max_workers_configuration(),
            'sns': self.validate_sns_configuration()
        }

        for name, check in checks.items():
            validation_result['configurations'][name] = check
            if not check['is_valid']:
                validation_result['is_valid'] = False
                validation_result['errors'].extend(check['errors'])
            validation_result['warnings'].extend(check['warnings'])

        return validation_result

    def validate_targets_configuration(self) -> Dict[str, Any]:
        """验证 DOMAINS"""
        result = self._new_result()
        targets = TargetConfigManager().parse_targets(os.getenv('DOMAINS', ''))
        result['total_targets'] = len(targets)

        if not targets:
            if self.require_targets:
                result['is_valid'] = False
                result['errors'].append("DOMAINS环境变量为空")
            else:
                result['warnings'].append("DOMAINS环境变量为空")

        return result

    def validate_timeout_configuration(self) -> Dict[str, Any]:
        """验证 CONNECT_TIMEOUT"""
        result = self._new_result()
        value = os.getenv('CONNECT_TIMEOUT')
        if not value:
            return result

        try:
            timeout = float(value)
        except ValueError:
            result['is_valid'] = False
            result['errors'].append(f"CONNECT_TIMEOUT格式无效: {value}")
            return result

        if timeout <= 0:
            result['is_valid'] = False
            result['errors'].append(f"CONNECT_TIMEOUT必须大于0: {value}")
        elif timeout > 60:
            result['warnings'].append(f"CONNECT_TIMEOUT过长: {timeout}秒")

        result['timeout'] = timeout
        return result

    def validate_log_level_configuration(self) -> Dict[str, Any]:
        """验证 LOG_LEVEL"""
        result = self._new_result()
        value = os.getenv('LOG_LEVEL')
        if value and value.upper() not in LOG_LEVELS:
            result['is_valid'] = False
            result['errors'].append(f"LOG_LEVEL无效: {value}")
        return result

    def validate_max_workers_configuration(self) -> Dict[str, Any]:
        """验证 MAX_WORKERS"""
        result = self._new_result()
        value = os.getenv('MAX_WORKERS')
        if not value:
            return result

        if not value.isdigit() or int(value) <= 0:
            result['is_valid'] = False
            result['errors'].append(f"MAX_WORKERS必须是正整数: {value}")
        return result

    def validate_sns_configuration(self) -> Dict[str, Any]:
        """验证 SNS_TOPIC_ARN（可选）"""
        result = self._new_result()
        result['arn_format_valid'] = False

        topic_arn = os.getenv('SNS_TOPIC_ARN')
        if not topic_arn:
            result['warnings'].append("SNS_TOPIC_ARN未设置，不发送通知")
            return result

        if re.match(SNS_ARN_PATTERN, topic_arn):
            result['arn_format_valid'] = True
        else:
            result['is_valid'] = False
            result['errors'].append(f"SNS主题ARN格式无效: {mask_value(topic_arn)}")

        return result

    def _new_result(self) -> Dict[str, Any]:
        return {'is_valid': True, 'errors': [], 'warnings': []}

    def get_configuration_summary(self) -> str:
        """
        获取配置摘要

        Returns:
            str: 配置摘要文本
        """
        validation_result = self.validate_all_configurations()

        lines = ["配置验证摘要", "=" * 30]
        lines.append("配置验证通过" if validation_result['is_valid'] else "配置验证失败")

        if validation_result['errors']:
            lines.append("\n错误:")
            for error in validation_result['errors']:
                lines.append(f"  • {error}")

        if validation_result['warnings']:
            lines.append("\n警告:")
            for warning in validation_result['warnings']:
                lines.append(f"  • {warning}")

        present = {name: os.getenv(name) for name in self.optional_env_vars if os.getenv(name)}
        if present:
            lines.append("\n环境变量:")
            for name, value in present.items():
                if name == 'SNS_TOPIC_ARN':
                    value = mask_value(value)
                lines.append(f"    {name}: {value}")

        return "\n".join(lines)
