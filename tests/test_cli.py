"""
Tests for the vendorbranch CLI through click's CliRunner.
"""

import json
from unittest.mock import patch, MagicMock

import pytest
from click.testing import CliRunner

from vendorbranch.cli import cli
from vendorbranch.commands.install import parse_name_args
from vendorbranch.domain.operation import ImportRecord, ImportResult, ImportState, ImportSummary
from vendorbranch.exit_codes import (
    CommandFailure,
    GuardFailure,
    GuardFailureKind,
    MergeConflictError,
    UsageError,
)


@pytest.fixture
def config(tmp_path):
    return {
        'cookbook_path': [str(tmp_path / 'cookbooks')],
        'default_branch': 'master',
        'site': {'url': 'https://cookbooks.example.com', 'timeout_seconds': 5},
        'git': {'timeout_seconds': 10},
    }


@pytest.fixture
def summary():
    summary = ImportSummary()
    summary.add(ImportResult('foo', '1.0', ImportState.MERGE_SUCCEEDED, 'vendor-foo',
                             tag='cookbook-site-imported-foo-1.0', files_changed=3))
    summary.add(ImportResult('bar', '0.2', ImportState.NO_CHANGE, 'vendor-bar',
                             dependency_of='foo'))
    return summary


class TestParseNameArgs:

    def test_one_name(self):
        assert parse_name_args(['foo']) == 'foo'

    def test_no_name(self):
        with pytest.raises(UsageError, match='please specify a cookbook'):
            parse_name_args([])

    def test_multiple_names(self):
        with pytest.raises(UsageError, match='multiple cookbooks'):
            parse_name_args(['foo', 'bar', 'baz'])


class TestInstallCommand:

    def invoke(self, config, args, orchestrator):
        runner = CliRunner()
        with patch('vendorbranch.commands.install.load_config', return_value=config), \
             patch('vendorbranch.commands.install.ImportOrchestrator', return_value=orchestrator) as cls:
            result = runner.invoke(cli, ['install'] + args)
        return result, cls

    def test_install_success(self, config, summary, tmp_path):
        orchestrator = MagicMock(last_result=None)
        orchestrator.run.return_value = summary

        result, cls = self.invoke(config, ['foo'], orchestrator)

        assert result.exit_code == 0
        orchestrator.run.assert_called_once_with('foo', None)
        options = cls.call_args.args[0]
        assert options.install_path == str(tmp_path / 'cookbooks')
        assert options.default_branch == 'master'
        assert options.dependencies is False
        assert 'foo' in result.output

    def test_positional_version_and_flags(self, config, summary, tmp_path):
        orchestrator = MagicMock(last_result=None)
        orchestrator.run.return_value = summary
        other = tmp_path / 'other'

        result, cls = self.invoke(
            config,
            ['foo', '1.0', '-d', '-B', 'main', '-o', f"{other}:{tmp_path / 'more'}"],
            orchestrator,
        )

        assert result.exit_code == 0
        orchestrator.run.assert_called_once_with('foo', '1.0')
        options = cls.call_args.args[0]
        assert options.install_path == str(other)
        assert options.default_branch == 'main'
        assert options.dependencies is True

    def test_json_output(self, config, summary):
        orchestrator = MagicMock(last_result=None)
        orchestrator.run.return_value = summary

        result, _ = self.invoke(config, ['foo', '--json'], orchestrator)

        lines = [json.loads(line) for line in result.output.strip().splitlines()]
        assert lines[0]['cookbook'] == 'foo'
        assert lines[0]['tag'] == 'cookbook-site-imported-foo-1.0'
        assert lines[1]['state'] == 'no_change'
        assert lines[1]['dependency_of'] == 'foo'
        assert lines[2] == {'type': 'summary', 'total': 2, 'imported': 1, 'unchanged': 1}

    def test_no_cookbook_is_usage_error(self, config):
        result, cls = self.invoke(config, [], MagicMock())

        assert result.exit_code == 1
        assert 'please specify a cookbook' in result.output
        cls.assert_not_called()

    def test_too_many_cookbooks(self, config):
        result, _ = self.invoke(config, ['a', 'b', 'c'], MagicMock())

        assert result.exit_code == 1
        assert 'not supported' in result.output

    def test_guard_failure_exits_1_with_hint(self, config):
        orchestrator = MagicMock(last_result=None)
        orchestrator.run.side_effect = GuardFailure(
            GuardFailureKind.UNCOMMITTED_CHANGES,
            "You have uncommitted changes",
            "Commit or stash your changes",
            details=" M foo/README.md\n",
        )

        result, _ = self.invoke(config, ['foo'], orchestrator)

        assert result.exit_code == 1
        assert 'uncommitted changes' in result.output
        assert 'foo/README.md' in result.output
        assert 'Commit or stash' in result.output

    def test_command_failure_exits_1(self, config):
        orchestrator = MagicMock(last_result=None)
        orchestrator.run.side_effect = CommandFailure(['git', 'commit'], 1, stderr="boom")

        result, _ = self.invoke(config, ['foo'], orchestrator)

        assert result.exit_code == 1
        assert 'boom' in result.output

    def test_merge_conflict_exits_3(self, config):
        orchestrator = MagicMock(last_result=None)
        orchestrator.run.side_effect = MergeConflictError(
            '/repo', 'vendor-foo', "both modified:   foo/README.md\n"
        )

        result, _ = self.invoke(config, ['foo'], orchestrator)

        assert result.exit_code == 3
        assert 'merge conflicts' in result.output
        assert 'both modified' in result.output

    def test_unexpected_error_exits_1(self, config):
        orchestrator = MagicMock(last_result=None)
        orchestrator.run.side_effect = OSError("disk full")

        result, _ = self.invoke(config, ['foo'], orchestrator)

        assert result.exit_code == 1
        assert 'disk full' in result.output

    def test_interrupt_exits_130(self, config):
        orchestrator = MagicMock(last_result=None)
        orchestrator.run.side_effect = KeyboardInterrupt()

        result, _ = self.invoke(config, ['foo'], orchestrator)

        assert result.exit_code == 130

    def test_partial_results_shown_on_failure(self, config):
        done = ImportSummary()
        done.add(ImportResult('foo', '1.0', ImportState.MERGE_SUCCEEDED, 'vendor-foo',
                              tag='cookbook-site-imported-foo-1.0', files_changed=3))
        orchestrator = MagicMock(last_result=done)
        orchestrator.run.side_effect = MergeConflictError('/repo', 'vendor-bar', "both modified:   bar/README.md\n")

        result, _ = self.invoke(config, ['foo', '-d', '--json'], orchestrator)

        assert result.exit_code == 3
        assert '"cookbook": "foo"' in result.output
        assert '"type": "summary"' in result.output
        assert 'merge conflicts' in result.output

    def test_unknown_option_exits_1(self, config):
        result, cls = self.invoke(config, ['--bogus', 'foo'], MagicMock())

        assert result.exit_code == 1
        assert 'No such option' in result.output
        cls.assert_not_called()

    def test_missing_option_value_exits_1(self, config):
        result, cls = self.invoke(config, ['foo', '-B'], MagicMock())

        assert result.exit_code == 1
        cls.assert_not_called()


class TestHistoryCommand:

    def test_not_a_repository(self, tmp_path):
        runner = CliRunner()

        result = runner.invoke(cli, ['history', '-o', str(tmp_path)])

        assert result.exit_code == 1
        assert 'not a git repository' in result.output

    def test_json_output(self, repo_dir):
        records = [ImportRecord('apt', '1.0', 'cookbook-site-imported-apt-1.0')]
        runner = CliRunner()

        with patch('vendorbranch.commands.history.ImportHistoryService') as cls:
            cls.return_value.records.return_value = records
            result = runner.invoke(cli, ['history', 'apt', '--json', '-o', str(repo_dir)])

        assert result.exit_code == 0
        cls.return_value.records.assert_called_once_with(str(repo_dir), 'apt')
        assert json.loads(result.output.strip())['version'] == '1.0'

    def test_table_output(self, repo_dir):
        records = [ImportRecord('apt', '1.0', 'cookbook-site-imported-apt-1.0', branch_exists=False)]
        runner = CliRunner()

        with patch('vendorbranch.commands.history.ImportHistoryService') as cls:
            cls.return_value.records.return_value = records
            result = runner.invoke(cli, ['history', '-o', str(repo_dir)])

        assert result.exit_code == 0
        assert 'apt' in result.output
        assert 'missing' in result.output

    def test_extra_argument_exits_1(self, repo_dir):
        runner = CliRunner()

        result = runner.invoke(cli, ['history', 'apt', 'yum', '-o', str(repo_dir)])

        assert result.exit_code == 1
        assert 'unexpected extra argument' in result.output


class TestCommandGroup:

    def test_unknown_command_exits_1(self):
        result = CliRunner().invoke(cli, ['upgrade'])

        assert result.exit_code == 1
        assert 'No such command' in result.output
