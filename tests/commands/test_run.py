"""Tests for `sage run`."""

from pathlib import Path

from click.testing import CliRunner

from cppsage.cli.cli import cli
from cppsage.core.context import SageContext
from cppsage.core.process.abc import ProcessResult
from tests.fakes.process_runner import FakeProcessRunner
from tests.fakes.user_feedback import FakeUserFeedback
from tests.test_utils.project_setup import build_executable, make_project


def test_run_builds_then_executes(tmp_path: Path) -> None:
    project = make_project(tmp_path)
    build_executable(project)
    runner = FakeProcessRunner()

    result = CliRunner().invoke(
        cli, ["run"], obj=SageContext.for_test(runner=runner, cwd=project.root)
    )

    assert result.exit_code == 0, result.output
    assert len(runner.run_calls) == 2
    assert runner.interactive_calls == [([str(project.executable_path)], project.root)]


def test_run_forwards_program_arguments(tmp_path: Path) -> None:
    project = make_project(tmp_path)
    build_executable(project)
    runner = FakeProcessRunner()

    result = CliRunner().invoke(
        cli,
        ["run", "--verbose", "input.txt"],
        obj=SageContext.for_test(runner=runner, cwd=project.root),
    )

    assert result.exit_code == 0, result.output
    command, _ = runner.interactive_calls[0]
    assert command[1:] == ["--verbose", "input.txt"]


def test_run_exits_with_program_exit_code(tmp_path: Path) -> None:
    project = make_project(tmp_path)
    build_executable(project)
    runner = FakeProcessRunner(interactive_exit_code=3)
    feedback = FakeUserFeedback()

    result = CliRunner().invoke(
        cli, ["run"], obj=SageContext.for_test(runner=runner, feedback=feedback, cwd=project.root)
    )

    assert result.exit_code == 3
    assert feedback.messages_at("warning") == ["demo exited with code 3"]


def test_run_configure_failure_never_executes(tmp_path: Path) -> None:
    project = make_project(tmp_path)
    build_executable(project)
    runner = FakeProcessRunner(results={("cmake", "-S"): ProcessResult(exit_code=1)})

    result = CliRunner().invoke(
        cli, ["run"], obj=SageContext.for_test(runner=runner, cwd=project.root)
    )

    assert result.exit_code == 1
    assert "Stage 'configure' failed" in result.output
    assert runner.interactive_calls == []


def test_run_missing_executable(tmp_path: Path) -> None:
    project = make_project(tmp_path)
    runner = FakeProcessRunner()

    result = CliRunner().invoke(
        cli, ["run"], obj=SageContext.for_test(runner=runner, cwd=project.root)
    )

    assert result.exit_code == 1
    assert "Executable not found at:" in result.output
    assert runner.interactive_calls == []


def test_run_dry_run_skips_executable_check(tmp_path: Path) -> None:
    project = make_project(tmp_path)
    runner = FakeProcessRunner()

    result = CliRunner().invoke(
        cli, ["run"], obj=SageContext.for_test(runner=runner, cwd=project.root, dry_run=True)
    )

    assert result.exit_code == 0, result.output
    assert len(runner.interactive_calls) == 1


def test_run_program_killed_by_signal_exits_like_a_shell(tmp_path: Path) -> None:
    project = make_project(tmp_path)
    build_executable(project)
    runner = FakeProcessRunner(interactive_exit_code=-11)

    result = CliRunner().invoke(
        cli, ["run"], obj=SageContext.for_test(runner=runner, cwd=project.root)
    )

    assert result.exit_code == 139
