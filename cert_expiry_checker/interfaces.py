"""
服务接口定义
"""
from abc import ABC, abstractmethod
from typing import List
from .models import CertificateView, HostOutcome, RunResult


class TLSConnectionInterface(ABC):
    """TLS连接接口"""

    @abstractmethod
    def peer_certificates(self) -> List[CertificateView]:
        """按对端发送顺序返回证书链"""
        pass

    @abstractmethod
    def close(self):
        """关闭连接"""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False


class TLSClientInterface(ABC):
    """TLS客户端接口"""

    @abstractmethod
    def dial(self, address: str, timeout: float) -> TLSConnectionInterface:
        """建立到 host:port 的TLS连接"""
        pass


class ReporterInterface(ABC):
    """结果输出接口"""

    @abstractmethod
    def report_progress(self, target: str):
        """输出探测进度"""
        pass

    @abstractmethod
    def report_connect_error(self, target: str, error_info: dict):
        """输出连接错误"""
        pass

    @abstractmethod
    def report_expired(self, target: str, cert: CertificateView):
        """输出过期证书"""
        pass

    @abstractmethod
    def report_valid(self, target: str, cert: CertificateView):
        """输出有效证书"""
        pass


class NotificationServiceInterface(ABC):
    """通知服务接口"""

    @abstractmethod
    def send_problem_report(self, result: RunResult) -> bool:
        """发送问题报告"""
        pass

    @abstractmethod
    def format_notification_content(self, result: RunResult) -> str:
        """格式化通知内容"""
        pass


class LoggerServiceInterface(ABC):
    """日志服务接口"""

    @abstractmethod
    def log_check_start(self, target_count: int):
        """记录检查开始"""
        pass

    @abstractmethod
    def log_host_outcome(self, outcome: HostOutcome):
        """记录单个目标的结果"""
        pass

    @abstractmethod
    def log_error(self, target: str, error: Exception):
        """记录错误信息"""
        pass
