"""
命令行入口
"""
import click

from .services.config_validator import ConfigValidator
from .services.coordinator import FanOutCoordinator
from .services.logger import LoggerService
from .services.prober import HostProber, DEFAULT_TIMEOUT
from .services.reporter import StderrReporter
from .services.sns_notification import SNSNotificationService
from .services.target_config import TargetConfigManager


MAX_EXIT_STATUS = 255


def exit_status(problem_count: int) -> int:
    """进程退出码只有8位，超出时截断为255而不是回绕"""
    return min(problem_count, MAX_EXIT_STATUS)


@click.command(
    epilog="Exit status indicates how many problems (connect errors plus expired "
           "certificates) were found; 0 means every certificate is currently valid."
)
@click.argument("targets", nargs=-1, metavar="HOSTNAME[:PORT] ...")
@click.option("--verbose", is_flag=True, default=False, help="show more output")
@click.option("--summary", is_flag=True, default=False, help="print a one line summary at the end")
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), envvar="CONNECT_TIMEOUT",
              default=DEFAULT_TIMEOUT, show_default=True, help="connect and handshake timeout in seconds")
@click.option("--max-workers", type=click.IntRange(min=1), envvar="MAX_WORKERS", default=None,
              help="limit the number of concurrent probes (default: one per host)")
@click.option("--sns-topic-arn", envvar="SNS_TOPIC_ARN", default=None,
              help="publish a problem report to this SNS topic")
@click.option("--log-level", envvar="LOG_LEVEL", default="WARNING", show_default=True,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
              help="diagnostic log level")
@click.option("--check-config", is_flag=True, default=False,
              help="validate the environment configuration and exit")
@click.pass_context
def main(ctx, targets, verbose, summary, timeout, max_workers, sns_topic_arn, log_level, check_config):
    """Check that the TLS certificates served by HOSTNAME[:PORT] are within their validity window."""
    if check_config:
        validator = ConfigValidator()
        click.echo(validator.get_configuration_summary(), err=True)
        ctx.exit(0 if validator.validate_all_configurations()['is_valid'] else 1)

    logger_service = LoggerService(log_level=log_level)

    targets = list(targets) or TargetConfigManager().get_targets()
    if not targets:
        raise click.UsageError("at least one HOSTNAME[:PORT] is required")

    reporter = StderrReporter(verbose=verbose)

    coordinator = FanOutCoordinator(
        prober=HostProber(timeout=timeout, reporter=reporter),
        max_workers=max_workers,
        logger_service=logger_service
    )
    result = coordinator.execute(targets)

    if summary:
        reporter.report_summary(result)

    if sns_topic_arn:
        notification_service = SNSNotificationService(topic_arn=sns_topic_arn)
        notification_service.send_problem_report(result)

    ctx.exit(exit_status(result.problem_count))
