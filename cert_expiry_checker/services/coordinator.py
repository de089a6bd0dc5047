"""
并发调度服务
"""
import os
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence
import logging

from ..interfaces import LoggerServiceInterface
from ..models import HostOutcome, RunResult
from .prober import HostProber
from .reporter import StderrReporter


class FanOutCoordinator:
    """为每个目标并发启动一个探测，等待全部完成后汇总问题数"""

    def __init__(
        self,
        prober: Optional[HostProber] = None,
        max_workers: Optional[int] = None,
        logger_service: Optional[LoggerServiceInterface] = None,
        verbose: bool = False
    ):
        """
        初始化调度器

        Args:
            prober: 单目标探测器
            max_workers: 并发上限，为None时读取环境变量 MAX_WORKERS，
                未设置则每个目标一个线程
            logger_service: 日志服务
            verbose: 未提供探测器时，默认输出器是否输出有效证书与错误提示
        """
        self.prober = prober or HostProber(reporter=StderrReporter(verbose=verbose))
        if max_workers is None and os.getenv('MAX_WORKERS'):
            max_workers = int(os.getenv('MAX_WORKERS'))
        self.max_workers = max_workers
        self.logger_service = logger_service
        self.logger = logging.getLogger(__name__)

    def run(self, targets: Sequence[str]) -> int:
        """
        检查所有目标，返回问题总数（连接失败数 + 过期证书数）

        是否输出有效证书由构造时的 verbose（或注入探测器的输出器）决定。

        Args:
            targets: 目标列表

        Returns:
            int: 问题总数
        """
        return self.execute(targets).problem_count

    def execute(self, targets: Sequence[str]) -> RunResult:
        """
        检查所有目标并返回完整结果

        Args:
            targets: 目标列表

        Returns:
            RunResult: 检查结果
        """
        start_time = time.monotonic()

        if self.logger_service:
            self.logger_service.log_check_start(len(targets))

        outcomes = self._probe_all(targets)

        # 所有探测完成后再汇总，结果与完成顺序无关
        problem_count = sum(outcome.problem_count for outcome in outcomes)

        if self.logger_service:
            for outcome in outcomes:
                self.logger_service.log_host_outcome(outcome)
            self.logger_service.log_check_end()

        result = RunResult(
            outcomes=outcomes,
            problem_count=problem_count,
            execution_time=time.monotonic() - start_time
        )

        self.logger.info(f"检查完成，共 {len(targets)} 个目标，发现 {problem_count} 个问题")
        return result

    def _probe_all(self, targets: Sequence[str]) -> List[HostOutcome]:
        if not targets:
            return []

        workers = self.max_workers or len(targets)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="probe") as executor:
            return list(executor.map(self.prober.probe, targets))
