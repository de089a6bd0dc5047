"""
结果输出服务
"""
import threading

import click

from ..interfaces import ReporterInterface
from ..models import CertificateView, RunResult
from .classifier import CertificateClassifier, format_timestamp


class StderrReporter(ReporterInterface):
    """将检查结果逐行输出到标准错误"""

    def __init__(self, verbose: bool = False):
        """
        初始化输出器

        Args:
            verbose: 是否输出进度与有效证书信息
        """
        self.verbose = verbose
        self.classifier = CertificateClassifier()
        # 多个探测线程共用，保证每行完整输出
        self._lock = threading.Lock()

    def _emit(self, target: str, message: str):
        with self._lock:
            click.echo(f"[{target}] {message}", err=True)

    def report_progress(self, target: str):
        if self.verbose:
            self._emit(target, "getting and checking cert...")

    def report_connect_error(self, target: str, error_info: dict):
        self._emit(target, f"{error_info['error_type']}: {error_info['error_message']}")
        if self.verbose and error_info.get('suggested_action'):
            self._emit(target, f"hint: {error_info['suggested_action']}")

    def report_expired(self, target: str, cert: CertificateView):
        self._emit(
            target,
            f"cert of {self.classifier.summarize(cert)} has expired! "
            f"({format_timestamp(cert.not_before)} - {format_timestamp(cert.not_after)})"
        )

    def report_valid(self, target: str, cert: CertificateView):
        if self.verbose:
            self._emit(target, f"cert of {self.classifier.summarize(cert)} has not yet expired.")

    def report_summary(self, result: RunResult):
        """输出汇总行"""
        with self._lock:
            click.echo(
                f"checked {len(result.outcomes)} host(s): "
                f"{len(result.connect_errors)} connect error(s), "
                f"{result.expired_certificate_count} expired cert(s)",
                err=True
            )
