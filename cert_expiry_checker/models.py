"""
数据模型定义
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Tuple


@dataclass(frozen=True)
class CertificateView:
    """证书只读视图（主题字段与有效期）"""
    organizations: Tuple[str, ...]
    common_name: str
    not_before: datetime
    not_after: datetime


@dataclass
class Classification:
    """证书链分类结果"""
    any_expired: bool
    expired: List[CertificateView]
    unexpired: List[CertificateView]


@dataclass
class HostOutcome:
    """单个目标的探测结果：连接错误或证书分类"""
    target: str
    error: Optional[str] = None
    error_type: Optional[str] = None
    expired: List[CertificateView] = field(default_factory=list)
    unexpired: List[CertificateView] = field(default_factory=list)

    @property
    def is_connect_error(self) -> bool:
        """判断是否连接失败"""
        return self.error is not None

    @property
    def problem_count(self) -> int:
        """该目标贡献的问题数：连接失败计1，否则为过期证书数"""
        if self.is_connect_error:
            return 1
        return len(self.expired)


@dataclass
class RunResult:
    """一次检查的汇总结果"""
    outcomes: List[HostOutcome]
    problem_count: int
    execution_time: float

    @property
    def connect_errors(self) -> List[HostOutcome]:
        return [outcome for outcome in self.outcomes if outcome.is_connect_error]

    @property
    def expired_certificate_count(self) -> int:
        return sum(len(outcome.expired) for outcome in self.outcomes)

    @property
    def is_healthy(self) -> bool:
        return self.problem_count == 0
