"""
日志服务
"""
import os
import logging
import threading
import traceback
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from ..interfaces import LoggerServiceInterface
from ..models import HostOutcome


PACKAGE_LOGGER_NAME = "cert_expiry_checker"


class LoggerService(LoggerServiceInterface):
    """日志服务实现"""

    def __init__(self, logger_name: str = PACKAGE_LOGGER_NAME, log_level: Optional[str] = None):
        """
        初始化日志服务

        Args:
            logger_name: 日志器名称
            log_level: 日志级别，如果为None则从环境变量读取
        """
        self.logger_name = logger_name
        self.log_level = log_level or os.getenv('LOG_LEVEL', 'WARNING')

        # 配置日志器
        self.logger = logging.getLogger(logger_name)
        self._configure_logger()

        self._lock = threading.Lock()
        self.reset_stats()

    def _configure_logger(self):
        """配置日志器"""
        level = getattr(logging, self.log_level.upper(), logging.WARNING)
        self.logger.setLevel(level)

        # 避免重复添加处理器
        if not self.logger.handlers:
            # 默认输出到标准错误
            handler = logging.StreamHandler()
            handler.setLevel(level)

            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            handler.setFormatter(formatter)

            self.logger.addHandler(handler)
        else:
            for handler in self.logger.handlers:
                handler.setLevel(level)

        # 防止日志传播到根日志器
        self.logger.propagate = False

    def log_check_start(self, target_count: int):
        """
        记录检查开始

        Args:
            target_count: 要检查的目标数量
        """
        self.execution_stats['start_time'] = datetime.now(timezone.utc)
        self.execution_stats['total_targets'] = target_count

        self.logger.info(f"开始TLS证书检查，共 {target_count} 个目标")

    def log_host_outcome(self, outcome: HostOutcome):
        """
        记录单个目标的检查结果

        Args:
            outcome: 探测结果
        """
        with self._lock:
            if outcome.is_connect_error:
                self.execution_stats['failed_hosts'] += 1
                self.execution_stats['errors'].append({
                    'target': outcome.target,
                    'error_type': outcome.error_type,
                    'error_message': outcome.error
                })
            else:
                self.execution_stats['connected_hosts'] += 1
                self.execution_stats['expired_certificates'] += len(outcome.expired)

        if outcome.is_connect_error:
            self.logger.info(f"目标检查失败 - {outcome.target}, 错误: {outcome.error_type}: {outcome.error}")
        elif outcome.expired:
            self.logger.info(
                f"发现无效证书 - {outcome.target}, "
                f"无效: {len(outcome.expired)} 张, 有效: {len(outcome.unexpired)} 张"
            )
        else:
            self.logger.info(f"证书正常 - {outcome.target}, 共 {len(outcome.unexpired)} 张")

    def log_error(self, target: str, error: Exception):
        """
        记录错误信息

        Args:
            target: 目标
            error: 异常对象
        """
        with self._lock:
            self.execution_stats['errors'].append({
                'target': target,
                'error_type': type(error).__name__,
                'error_message': str(error)
            })

        self.logger.error(f"目标 {target} 检查时发生错误: {type(error).__name__}: {str(error)}")
        self.logger.debug(f"目标 {target} 错误堆栈跟踪:\n{traceback.format_exc()}")

    def log_check_end(self):
        """记录检查结束"""
        self.execution_stats['end_time'] = datetime.now(timezone.utc)
        summary = self.get_execution_summary()

        self.logger.info(
            f"TLS证书检查完成，用时 {summary['duration_seconds']:.2f} 秒: "
            f"总计 {summary['total_targets']} 个目标, "
            f"连接成功 {summary['connected_hosts']} 个, "
            f"连接失败 {summary['failed_hosts']} 个, "
            f"无效证书 {summary['expired_certificates']} 张"
        )

    def log_configuration_info(self, config: Dict[str, Any]):
        """
        记录配置信息

        Args:
            config: 配置信息字典
        """
        safe_config = self._sanitize_config(config)

        self.logger.info("系统配置信息:")
        for key, value in safe_config.items():
            self.logger.info(f"  {key}: {value}")

    def _sanitize_config(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        清理配置信息中的敏感数据

        Args:
            config: 原始配置

        Returns:
            Dict[str, Any]: 清理后的配置
        """
        safe_config = {}
        for key, value in config.items():
            key_lower = key.lower()

            is_sensitive = (
                key_lower in {'password', 'secret', 'token', 'key', 'sns_topic_arn'} or
                key_lower.endswith('_key') or
                key_lower.endswith('_secret') or
                key_lower.endswith('_password') or
                key_lower.endswith('_token')
            )

            if is_sensitive and isinstance(value, str) and value:
                safe_config[key] = mask_value(value)
            else:
                safe_config[key] = value

        return safe_config

    def get_execution_summary(self) -> Dict[str, Any]:
        """
        获取执行摘要

        Returns:
            Dict[str, Any]: 执行摘要信息
        """
        stats = self.execution_stats
        duration = 0
        if stats['start_time'] and stats['end_time']:
            duration = (stats['end_time'] - stats['start_time']).total_seconds()

        return {
            'start_time': stats['start_time'].isoformat() if stats['start_time'] else None,
            'end_time': stats['end_time'].isoformat() if stats['end_time'] else None,
            'duration_seconds': duration,
            'total_targets': stats['total_targets'],
            'connected_hosts': stats['connected_hosts'],
            'failed_hosts': stats['failed_hosts'],
            'expired_certificates': stats['expired_certificates'],
            'problem_count': stats['failed_hosts'] + stats['expired_certificates'],
            'error_count': len(stats['errors']),
            'errors': list(stats['errors'])
        }

    def reset_stats(self):
        """重置执行统计"""
        self.execution_stats = {
            'start_time': None,
            'end_time': None,
            'total_targets': 0,
            'connected_hosts': 0,
            'failed_hosts': 0,
            'expired_certificates': 0,
            'errors': []
        }


def mask_value(value: str) -> str:
    """隐藏敏感值，ARN隐藏账号部分"""
    if value.startswith('arn:'):
        parts = value.split(':')
        if len(parts) >= 6:
            return f"{':'.join(parts[:4])}:***:{':'.join(parts[5:])}"
        return "***"
    return value[:3] + "***" if len(value) > 3 else "***"
