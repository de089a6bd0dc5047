"""
命令行入口测试
"""
import pytest
import os
from unittest.mock import patch, MagicMock

from click.testing import CliRunner

from cert_expiry_checker.cli import main, exit_status
from cert_expiry_checker.models import HostOutcome, RunResult


def make_result(problem_count, outcomes=None):
    return RunResult(outcomes=outcomes or [], problem_count=problem_count, execution_time=0.1)


class TestCli:
    """命令行入口测试类"""

    def setup_method(self):
        """测试前准备"""
        self.runner = CliRunner()
        self.env = {'DOMAINS': '', 'SNS_TOPIC_ARN': '', 'MAX_WORKERS': '', 'CONNECT_TIMEOUT': '', 'LOG_LEVEL': ''}

    @patch('cert_expiry_checker.cli.FanOutCoordinator')
    def test_exit_status_is_problem_count(self, mock_coordinator_cls):
        """测试退出码等于问题数"""
        mock_coordinator_cls.return_value.execute.return_value = make_result(2)

        result = self.runner.invoke(main, ['a.test', 'b.test:8443', 'c.test'], env=self.env)

        assert result.exit_code == 2
        mock_coordinator_cls.return_value.execute.assert_called_once_with(['a.test', 'b.test:8443', 'c.test'])

    @patch('cert_expiry_checker.cli.FanOutCoordinator')
    def test_healthy_exit_zero(self, mock_coordinator_cls):
        mock_coordinator_cls.return_value.execute.return_value = make_result(0)

        result = self.runner.invoke(main, ['a.test'], env=self.env)

        assert result.exit_code == 0

    @patch('cert_expiry_checker.cli.HostProber')
    @patch('cert_expiry_checker.cli.FanOutCoordinator')
    def test_options_passed_through(self, mock_coordinator_cls, mock_prober_cls):
        """测试选项传递给探测器与调度器"""
        mock_coordinator_cls.return_value.execute.return_value = make_result(0)

        result = self.runner.invoke(
            main, ['--verbose', '--timeout', '2.5', '--max-workers', '3', 'a.test'], env=self.env
        )

        assert result.exit_code == 0
        assert mock_prober_cls.call_args.kwargs['timeout'] == 2.5
        assert mock_prober_cls.call_args.kwargs['reporter'].verbose is True
        assert mock_coordinator_cls.call_args.kwargs['max_workers'] == 3

    @patch('cert_expiry_checker.cli.FanOutCoordinator')
    def test_targets_from_env(self, mock_coordinator_cls):
        """测试没有位置参数时读取DOMAINS"""
        mock_coordinator_cls.return_value.execute.return_value = make_result(1)
        env = dict(self.env, DOMAINS='a.test,b.test')

        result = self.runner.invoke(main, [], env=env)

        assert result.exit_code == 1
        mock_coordinator_cls.return_value.execute.assert_called_once_with(['a.test', 'b.test'])

    def test_no_targets_is_usage_error(self):
        result = self.runner.invoke(main, [], env=self.env)

        assert result.exit_code == 2
        assert "HOSTNAME[:PORT]" in result.output

    def test_invalid_timeout(self):
        result = self.runner.invoke(main, ['--timeout', '0', 'a.test'], env=self.env)

        assert result.exit_code == 2

    @patch('cert_expiry_checker.cli.SNSNotificationService')
    @patch('cert_expiry_checker.cli.FanOutCoordinator')
    def test_sns_report(self, mock_coordinator_cls, mock_sns_cls):
        """测试配置主题时发送问题报告"""
        run_result = make_result(1)
        mock_coordinator_cls.return_value.execute.return_value = run_result
        arn = 'arn:aws:sns:us-east-1:123456789012:cert-alerts'

        result = self.runner.invoke(main, ['--sns-topic-arn', arn, 'a.test'], env=self.env)

        assert result.exit_code == 1
        mock_sns_cls.assert_called_once_with(topic_arn=arn)
        mock_sns_cls.return_value.send_problem_report.assert_called_once_with(run_result)

    @patch('cert_expiry_checker.cli.SNSNotificationService')
    @patch('cert_expiry_checker.cli.FanOutCoordinator')
    def test_no_sns_without_topic(self, mock_coordinator_cls, mock_sns_cls):
        mock_coordinator_cls.return_value.execute.return_value = make_result(0)

        self.runner.invoke(main, ['a.test'], env=self.env)

        mock_sns_cls.assert_not_called()

    @patch('cert_expiry_checker.cli.FanOutCoordinator')
    def test_summary_line(self, mock_coordinator_cls):
        outcomes = [HostOutcome(target="b.test:443", error="refused", error_type="ConnectionRefusedError")]
        mock_coordinator_cls.return_value.execute.return_value = make_result(1, outcomes)

        result = self.runner.invoke(main, ['--summary', 'b.test'], env=self.env)

        assert "checked 1 host(s): 1 connect error(s), 0 expired cert(s)" in result.output

    def test_help_mentions_exit_status(self):
        result = self.runner.invoke(main, ['--help'])

        assert result.exit_code == 0
        assert "--verbose" in result.output
        assert "Exit status" in result.output


class TestExitStatus:
    """退出码测试类"""

    def test_small_counts_unchanged(self):
        assert exit_status(0) == 0
        assert exit_status(7) == 7

    def test_large_counts_capped(self):
        """测试超过255时截断而不是回绕为0"""
        assert exit_status(255) == 255
        assert exit_status(256) == 255
        assert exit_status(1000) == 255


class TestCheckConfig:
    """配置检查选项测试类"""

    def test_valid_configuration(self):
        runner = CliRunner()

        result = runner.invoke(main, ['--check-config'], env={'CONNECT_TIMEOUT': '5', 'LOG_LEVEL': ''})

        assert result.exit_code == 0
        assert "配置验证通过" in result.output

    def test_invalid_configuration(self):
        """测试配置无效时退出码为1"""
        runner = CliRunner()

        result = runner.invoke(main, ['--check-config'], env={'MAX_WORKERS': '2', 'SNS_TOPIC_ARN': 'not-an-arn',
                                                              'LOG_LEVEL': ''})

        assert result.exit_code == 1
        assert "配置验证失败" in result.output
