"""
AWS Lambda函数入口点
"""
import os
from typing import Dict, Any, List
from datetime import datetime, timezone

from .services.config_validator import ConfigValidator
from .services.coordinator import FanOutCoordinator
from .services.error_handler import NetworkErrorHandler
from .services.logger import LoggerService
from .services.prober import HostProber
from .services.sns_notification import SNSNotificationService
from .services.target_config import TargetConfigManager
from .models import RunResult


class CertificateExpiryMonitor:
    """定时检查入口：读取环境配置，检查目标并发送通知"""

    def __init__(self):
        """初始化监控器"""
        self.logger_service = LoggerService()
        self.target_manager = TargetConfigManager()
        self.config_validator = ConfigValidator(require_targets=False)
        self.coordinator = FanOutCoordinator(
            prober=HostProber(),
            logger_service=self.logger_service
        )
        self.notification_service = None
        if os.getenv('SNS_TOPIC_ARN'):
            self.notification_service = SNSNotificationService()

        self._log_configuration()

    def _log_configuration(self):
        """记录系统配置信息"""
        config = {
            'domains': os.getenv('DOMAINS', ''),
            'connect_timeout': self.coordinator.prober.timeout,
            'max_workers': self.coordinator.max_workers,
            'sns_topic_arn': os.getenv('SNS_TOPIC_ARN', ''),
            'log_level': self.logger_service.log_level
        }
        self.logger_service.log_configuration_info(config)

        validation = self.config_validator.validate_all_configurations()
        for error in validation['errors']:
            self.logger_service.logger.error(f"配置错误: {error}")

    def execute(self, targets: List[str]) -> RunResult:
        """
        检查目标并在发现问题时发送通知

        Args:
            targets: 目标列表

        Returns:
            RunResult: 检查结果
        """
        result = self.coordinator.execute(targets)

        if self.notification_service:
            sent = self.notification_service.send_problem_report(result)
            if not sent:
                self.logger_service.logger.error("问题报告发送失败")

        return result


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda函数入口点

    Args:
        event: EventBridge触发事件，可选 "targets"（列表或逗号分隔字符串）覆盖 DOMAINS
        context: Lambda运行时上下文

    Returns:
        dict: 执行结果和统计信息
    """
    try:
        monitor = CertificateExpiryMonitor()

        targets = (event or {}).get('targets')
        if isinstance(targets, str):
            targets = monitor.target_manager.parse_targets(targets)
        targets = targets or monitor.target_manager.get_targets()
        if not targets:
            return {
                'statusCode': 500,
                'body': {
                    'message': 'No targets configured',
                    'timestamp': datetime.now(timezone.utc).isoformat()
                }
            }

        result = monitor.execute(targets)

        return {
            'statusCode': 200,
            'body': {
                'message': 'Certificate expiry check executed successfully',
                'summary': {
                    'total_targets': len(result.outcomes),
                    'connect_errors': len(result.connect_errors),
                    'expired_certificates': result.expired_certificate_count,
                    'problem_count': result.problem_count,
                    'execution_time_seconds': result.execution_time
                },
                'failed_targets': [outcome.target for outcome in result.connect_errors],
                'expired_targets': [outcome.target for outcome in result.outcomes if outcome.expired],
                'error_statistics': NetworkErrorHandler().get_error_statistics(
                    monitor.logger_service.get_execution_summary()['errors']
                ),
                'timestamp': datetime.now(timezone.utc).isoformat()
            }
        }

    except Exception as e:
        LoggerService().log_error("lambda_handler", e)
        return {
            'statusCode': 500,
            'body': {
                'message': 'Certificate expiry check encountered a critical error',
                'error': str(e),
                'timestamp': datetime.now(timezone.utc).isoformat()
            }
        }
