"""
单目标探测服务
"""
import os
from datetime import datetime, timezone
from typing import Callable, Optional
import logging

from ..interfaces import TLSClientInterface, ReporterInterface
from ..models import HostOutcome
from .classifier import CertificateClassifier
from .error_handler import NetworkErrorHandler
from .reporter import StderrReporter
from .target_config import normalize_target
from .tls_client import PyOpenSSLClient


DEFAULT_TIMEOUT = 10.0


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class HostProber:
    """单目标探测器：一次TLS握手，取证书链并分类"""

    def __init__(
        self,
        timeout: Optional[float] = None,
        tls_client: Optional[TLSClientInterface] = None,
        reporter: Optional[ReporterInterface] = None,
        clock: Callable[[], datetime] = utc_now
    ):
        """
        初始化探测器

        Args:
            timeout: 连接与握手超时（秒），为None时读取环境变量 CONNECT_TIMEOUT
            tls_client: TLS客户端
            reporter: 结果输出器
            clock: 当前时间来源
        """
        self.timeout = timeout if timeout is not None else float(os.getenv('CONNECT_TIMEOUT', DEFAULT_TIMEOUT))
        self.tls_client = tls_client or PyOpenSSLClient()
        self.reporter = reporter or StderrReporter()
        self.clock = clock
        self.classifier = CertificateClassifier()
        self.error_handler = NetworkErrorHandler()
        self.logger = logging.getLogger(__name__)

    def probe(self, target: str) -> HostOutcome:
        """
        探测单个目标，任何失败都以 HostOutcome 返回，不向外抛出

        Args:
            target: host 或 host:port

        Returns:
            HostOutcome: 探测结果
        """
        address = normalize_target(target)
        self.reporter.report_progress(address)

        try:
            with self.tls_client.dial(address, self.timeout) as connection:
                certs = connection.peer_certificates()
                classification = self.classifier.classify(certs, self.clock())
        except Exception as e:
            error_info = self.error_handler.handle_connect_error(address, e)
            self.reporter.report_connect_error(address, error_info)
            return HostOutcome(
                target=address,
                error=error_info['error_message'],
                error_type=error_info['error_type']
            )

        self.logger.debug(
            f"目标 {address} 证书链 {len(certs)} 张，"
            f"无效 {len(classification.expired)} 张"
        )

        if classification.any_expired:
            for cert in classification.expired:
                self.reporter.report_expired(address, cert)
        else:
            for cert in classification.unexpired:
                self.reporter.report_valid(address, cert)

        return HostOutcome(
            target=address,
            expired=classification.expired,
            unexpired=classification.unexpired
        )
