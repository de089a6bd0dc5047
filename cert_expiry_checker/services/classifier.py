"""
证书有效期分类服务
"""
from datetime import datetime, timezone
from typing import Sequence, List

from ..models import CertificateView, Classification


TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'


class CertificateClassifier:
    """证书有效期分类器"""

    def is_valid(self, cert: CertificateView, now: datetime) -> bool:
        """
        判断证书在给定时间是否有效

        有效期上下界均为开区间：now 必须严格晚于 not_before 且严格早于 not_after。

        Args:
            cert: 证书视图
            now: 检查时间

        Returns:
            bool: 是否有效
        """
        return cert.not_before < now < cert.not_after

    def classify(self, certs: Sequence[CertificateView], now: datetime) -> Classification:
        """
        将证书链分为有效与无效两组（保持输入顺序）

        Args:
            certs: 证书链
            now: 检查时间

        Returns:
            Classification: 分类结果
        """
        expired: List[CertificateView] = []
        unexpired: List[CertificateView] = []

        for cert in certs:
            if self.is_valid(cert, now):
                unexpired.append(cert)
            else:
                expired.append(cert)

        return Classification(
            any_expired=bool(expired),
            expired=expired,
            unexpired=unexpired
        )

    def summarize(self, cert: CertificateView) -> str:
        """
        生成证书主题摘要，例如 "O=Acme, O=Acme Labs, CN=acme.test"

        Args:
            cert: 证书视图

        Returns:
            str: 摘要
        """
        parts = [f"O={org}" for org in cert.organizations]
        parts.append(f"CN={cert.common_name}")
        return ", ".join(parts)


def format_timestamp(value: datetime) -> str:
    """按 UTC 格式化时间为 YYYY-MM-DD HH:MM:SS"""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(TIMESTAMP_FORMAT)
