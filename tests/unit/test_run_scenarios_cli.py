"""
Command line entry point tests. The runner itself is mocked out.
"""

import pytest
import textwrap
from unittest.mock import AsyncMock, PropertyMock

import run_scenarios
from models.scenario_outcome import RunSummary, ScenarioOutcome, ScenarioStatus


@pytest.fixture(autouse=True)
def quiet_logging(mocker):
    return mocker.patch.object(run_scenarios, 'configure_logging')


@pytest.fixture
def scenario_dir(tmp_path):
    (tmp_path / 's01_smoke.py').write_text(textwrap.dedent('''
        async def scenario_loads(todo):
            """Application loads"""
    '''))
    return tmp_path


def summary_of(*statuses):
    summary = RunSummary()
    for status in statuses:
        summary.add(ScenarioOutcome(name='s', status=status, duration_ms=1.0))
    return summary


@pytest.fixture
def runner_cls(mocker):
    runner_cls = mocker.patch.object(run_scenarios, 'ScenarioRunner')
    runner_cls.return_value.run = AsyncMock(return_value=summary_of(ScenarioStatus.PASSED))
    return runner_cls


def test_list_prints_files_and_scenarios(scenario_dir, capsys, runner_cls):
    exit_code = run_scenarios.main(['--list', '--scenarios-dir', str(scenario_dir)])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert 's01_smoke.py' in out
    assert 'Application loads' in out
    runner_cls.assert_not_called()


def test_unknown_single_file_is_usage_error(scenario_dir, capsys, runner_cls):
    exit_code = run_scenarios.main(['--single', 's42_nope.py', '--scenarios-dir', str(scenario_dir)])

    assert exit_code == 2
    assert 'Scenario file not found' in capsys.readouterr().err
    runner_cls.assert_not_called()


def test_missing_directory_is_usage_error(tmp_path, runner_cls):
    assert run_scenarios.main(['--scenarios-dir', str(tmp_path / 'absent')]) == 2


def test_all_passing_exits_zero(scenario_dir, runner_cls):
    exit_code = run_scenarios.main(['--all', '--scenarios-dir', str(scenario_dir)])

    assert exit_code == 0
    scenarios = runner_cls.return_value.run.await_args.args[0]
    assert [s.name for s in scenarios] == ['Application loads']


def test_single_file_runs_only_that_file(scenario_dir, runner_cls):
    (scenario_dir / 's02_other.py').write_text('async def scenario_other(todo):\n    pass\n')

    run_scenarios.main(['--single', 's02_other', '--scenarios-dir', str(scenario_dir)])

    scenarios = runner_cls.return_value.run.await_args.args[0]
    assert [s.source_file for s in scenarios] == ['s02_other.py']


def test_any_failure_exits_one(scenario_dir, runner_cls):
    runner_cls.return_value.run.return_value = summary_of(ScenarioStatus.PASSED, ScenarioStatus.FAILED)

    assert run_scenarios.main(['--scenarios-dir', str(scenario_dir)]) == 1


def test_empty_run_exits_one(scenario_dir, runner_cls):
    runner_cls.return_value.run.return_value = summary_of()

    assert run_scenarios.main(['--scenarios-dir', str(scenario_dir)]) == 1


def test_exit_code_comes_from_run_summary(scenario_dir, runner_cls, mocker):
    exit_code = mocker.patch.object(RunSummary, 'exit_code', new_callable=PropertyMock, return_value=1)

    assert run_scenarios.main(['--scenarios-dir', str(scenario_dir)]) == 1
    exit_code.assert_called_once_with()


def test_modes_are_mutually_exclusive(scenario_dir):
    with pytest.raises(SystemExit) as exc_info:
        run_scenarios.main(['--all', '--list'])

    assert exc_info.value.code == 2


def test_log_level_is_passed_through(scenario_dir, runner_cls, quiet_logging):
    run_scenarios.main(['--log-level', 'DEBUG', '--scenarios-dir', str(scenario_dir)])

    quiet_logging.assert_called_once_with('DEBUG')
