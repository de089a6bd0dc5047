"""
错误处理服务
"""
import socket
from typing import Any, Dict, List
from datetime import datetime, timezone
import logging

from OpenSSL import SSL


class NetworkErrorHandler:
    """连接错误处理器"""

    def __init__(self):
        """初始化连接错误处理器"""
        self.logger = logging.getLogger(__name__)

    def handle_connect_error(self, target: str, error: Exception) -> Dict[str, Any]:
        """
        处理连接错误（DNS解析、TCP连接、TLS握手）

        Args:
            target: 目标 host:port
            error: 异常对象

        Returns:
            Dict[str, Any]: 错误处理结果
        """
        error_info = {
            'target': target,
            'error_type': type(error).__name__,
            'error_message': self.describe(error),
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'suggested_action': self._get_suggested_action(error)
        }

        self.logger.info(
            f"目标 {target} 连接失败: {error_info['error_type']}: {error_info['error_message']}"
        )

        return error_info

    def describe(self, error: Exception) -> str:
        """
        生成错误描述

        pyOpenSSL 的错误参数是 (库, 函数, 原因) 元组列表，取原因部分。
        """
        if isinstance(error, SSL.Error) and error.args and isinstance(error.args[0], list):
            reasons = [str(item[-1]) for item in error.args[0] if item]
            if reasons:
                return "; ".join(reasons)

        message = str(error)
        return message or type(error).__name__

    def _get_suggested_action(self, error: Exception) -> str:
        """
        获取错误的建议处理方案

        Args:
            error: 异常对象

        Returns:
            str: 建议的处理方案
        """
        error_message = str(error).lower()

        if isinstance(error, socket.timeout):
            return "检查网络连接，考虑增加超时时间"
        elif isinstance(error, socket.gaierror):
            return "检查主机名是否正确，DNS服务器是否可用"
        elif isinstance(error, ConnectionRefusedError):
            return "检查目标服务器是否运行，端口是否正确"
        elif isinstance(error, ValueError):
            return "检查目标格式，应为 HOSTNAME[:PORT]"
        elif isinstance(error, SSL.Error):
            if 'wrong version number' in error_message or 'unexpected eof' in error_message:
                return "目标端口可能没有提供TLS服务"
            elif 'handshake failure' in error_message:
                return "TLS握手失败，检查TLS版本与密码套件兼容性"
            else:
                return "TLS连接问题，检查服务器TLS配置"
        elif 'network is unreachable' in error_message:
            return "网络不可达，检查网络连接和路由"
        elif 'no route to host' in error_message:
            return "无法路由到主机，检查防火墙和网络配置"
        else:
            return "检查网络连接和服务器状态"

    def get_error_statistics(self, error_list: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        获取错误统计信息

        Args:
            error_list: 错误信息列表

        Returns:
            Dict[str, Any]: 错误统计
        """
        if not error_list:
            return {
                'total_errors': 0,
                'error_types': {},
                'most_common_error': None,
                'most_common_error_count': 0
            }

        error_types = {}
        for error_info in error_list:
            error_type = error_info.get('error_type', 'Unknown')
            error_types[error_type] = error_types.get(error_type, 0) + 1

        most_common_error = max(error_types.items(), key=lambda x: x[1])

        return {
            'total_errors': len(error_list),
            'error_types': error_types,
            'most_common_error': most_common_error[0],
            'most_common_error_count': most_common_error[1]
        }
