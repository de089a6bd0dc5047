"""
SNS通知服务
"""
import os
import time
from typing import Optional
import logging
from datetime import datetime, timezone

import boto3
from botocore.exceptions import ClientError

from ..interfaces import NotificationServiceInterface
from ..models import RunResult
from .classifier import CertificateClassifier, format_timestamp


MAX_SUBJECT_LENGTH = 100


class SNSNotificationService(NotificationServiceInterface):
    """SNS通知服务实现"""

    def __init__(self, topic_arn: Optional[str] = None, region_name: Optional[str] = None):
        """
        初始化SNS通知服务

        Args:
            topic_arn: SNS主题ARN，如果为None则从环境变量读取
            region_name: AWS区域名称，如果为None则自动检测
        """
        self.topic_arn = topic_arn or os.getenv('SNS_TOPIC_ARN')

        if region_name:
            self.region_name = region_name
        elif self.topic_arn and self.topic_arn.startswith('arn:aws:sns:'):
            # 从SNS ARN中提取区域
            self.region_name = self.topic_arn.split(':')[3]
        else:
            self.region_name = os.getenv('AWS_REGION', 'us-east-1')

        self.logger = logging.getLogger(__name__)
        self.classifier = CertificateClassifier()
        self.sns_client = boto3.client('sns', region_name=self.region_name)

    def send_problem_report(self, result: RunResult) -> bool:
        """
        发送问题报告，没有问题时不发送

        Args:
            result: 检查结果

        Returns:
            bool: 发送是否成功
        """
        if result.is_healthy:
            self.logger.info("所有目标状态正常，跳过通知发送")
            return True

        if not self.topic_arn:
            self.logger.error("SNS主题ARN未配置")
            return False

        subject = self._format_subject(result)
        message = self.format_notification_content(result)

        return self._publish_with_retry(subject, message)

    def _publish_with_retry(self, subject: str, message: str, max_retries: int = 3) -> bool:
        """
        带重试机制的SNS消息发布

        Args:
            subject: 消息主题
            message: 消息内容
            max_retries: 最大重试次数

        Returns:
            bool: 发送是否成功
        """
        for attempt in range(max_retries + 1):
            try:
                response = self.sns_client.publish(
                    TopicArn=self.topic_arn,
                    Subject=subject,
                    Message=message
                )

                self.logger.info(f"SNS通知发送成功，MessageId: {response.get('MessageId')}")
                return True

            except ClientError as e:
                error_code = e.response['Error']['Code']
                error_message = e.response['Error']['Message']

                if self._is_retryable_error(error_code) and attempt < max_retries:
                    wait_time = 2 ** attempt  # 指数退避
                    self.logger.warning(
                        f"SNS发送失败 (尝试 {attempt + 1}/{max_retries + 1}) - {error_code}: {error_message}，"
                        f"{wait_time}秒后重试"
                    )
                    time.sleep(wait_time)
                    continue

                self.logger.error(f"SNS发送失败 - {error_code}: {error_message}")
                return False

            except Exception as e:
                self.logger.error(f"发送SNS通知时发生错误: {type(e).__name__}: {str(e)}")
                return False

        return False

    def _is_retryable_error(self, error_code: str) -> bool:
        retryable_errors = {
            'Throttling',
            'ThrottlingException',
            'ServiceUnavailable',
            'InternalError',
            'RequestTimeout'
        }
        return error_code in retryable_errors

    def _format_subject(self, result: RunResult) -> str:
        subject = f"certexpchk: {result.problem_count} problem(s) on {len(result.outcomes)} host(s)"
        return subject[:MAX_SUBJECT_LENGTH]

    def format_notification_content(self, result: RunResult) -> str:
        """
        格式化通知内容

        Args:
            result: 检查结果

        Returns:
            str: 格式化的通知内容
        """
        lines = [
            "TLS证书有效期检查报告",
            "=" * 30,
            f"检查时间: {format_timestamp(datetime.now(timezone.utc))} UTC",
            f"目标数: {len(result.outcomes)}",
            f"问题数: {result.problem_count}",
            ""
        ]

        connect_errors = result.connect_errors
        if connect_errors:
            lines.append("连接失败:")
            for outcome in connect_errors:
                lines.append(f"• {outcome.target}")
                lines.append(f"  错误: {outcome.error_type}: {outcome.error}")
            lines.append("")

        expired_outcomes = [outcome for outcome in result.outcomes if outcome.expired]
        if expired_outcomes:
            lines.append("无效证书:")
            for outcome in expired_outcomes:
                for cert in outcome.expired:
                    lines.append(f"• {outcome.target}")
                    lines.append(f"  证书: {self.classifier.summarize(cert)}")
                    lines.append(
                        f"  有效期: {format_timestamp(cert.not_before)} - {format_timestamp(cert.not_after)}"
                    )
            lines.append("")

        if not connect_errors and not expired_outcomes:
            lines.append("所有证书状态正常。")

        lines.append("此消息由 certexpchk 自动发送。")
        return "\n".join(lines)
