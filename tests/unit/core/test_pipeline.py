"""Tests for the build and run stage pipelines."""

from pathlib import Path

import pytest

from cppsage.core.errors import BuildStageFailed, ExecutableNotFound
from cppsage.core.pipeline import (
    COMPILE_STAGE,
    CONFIGURE_STAGE,
    EXECUTE_STAGE,
    BuildOrchestrator,
    PipelineResult,
    RunOrchestrator,
    Stage,
    run_stages,
)
from cppsage.core.process.abc import ProcessResult
from tests.fakes.process_runner import FakeProcessRunner
from tests.test_utils.project_setup import build_executable, install_toolchain, make_project

CONFIGURE_PREFIX = ("cmake", "-S")
COMPILE_PREFIX = ("cmake", "--build")


def _ignore(result: ProcessResult) -> None:
    pass


def test_run_stages_runs_all_stages_in_order(tmp_path: Path) -> None:
    runner = FakeProcessRunner()
    stages = [
        Stage("one", ("tool", "a"), tmp_path),
        Stage("two", ("tool", "b"), tmp_path),
    ]

    result = run_stages(stages, runner, _ignore)

    assert result == PipelineResult(succeeded=True, exit_code=0, completed_stages=("one", "two"))
    assert [cmd for cmd, _ in runner.run_calls] == [["tool", "a"], ["tool", "b"]]


def test_run_stages_stops_at_first_failure(tmp_path: Path) -> None:
    runner = FakeProcessRunner(results={("tool", "a"): ProcessResult(exit_code=3)})
    stages = [
        Stage("one", ("tool", "a"), tmp_path),
        Stage("two", ("tool", "b"), tmp_path),
    ]

    result = run_stages(stages, runner, _ignore)

    assert result == PipelineResult(succeeded=False, exit_code=3, failed_stage="one")
    assert runner.calls_starting_with("tool", "b") == []


def test_run_stages_forwards_output_verbatim(tmp_path: Path) -> None:
    output = ProcessResult(exit_code=0, stdout="-- Configuring done\n", stderr="warning: x\n")
    runner = FakeProcessRunner(results={("tool",): output})
    forwarded: list[ProcessResult] = []

    run_stages([Stage("one", ("tool",), tmp_path)], runner, forwarded.append)

    assert forwarded == [output]


def test_run_stages_announces_each_stage(tmp_path: Path) -> None:
    started: list[str] = []
    stages = [Stage("one", ("tool", "a"), tmp_path), Stage("two", ("tool", "b"), tmp_path)]

    run_stages(stages, FakeProcessRunner(), _ignore, lambda stage: started.append(stage.name))

    assert started == ["one", "two"]


def test_build_stage_commands_without_toolchain(tmp_path: Path) -> None:
    project = make_project(tmp_path)

    stages = BuildOrchestrator(FakeProcessRunner(), _ignore).stages(project)

    assert [stage.name for stage in stages] == [CONFIGURE_STAGE, COMPILE_STAGE]
    assert stages[0].command == ("cmake", "-S", ".", "-B", "build", "-G", "Ninja")
    assert stages[1].command == ("cmake", "--build", "build")
    assert all(stage.cwd == project.root for stage in stages)


def test_build_stage_commands_with_toolchain(tmp_path: Path) -> None:
    project = make_project(tmp_path)
    install_toolchain(project)

    stages = BuildOrchestrator(FakeProcessRunner(), _ignore).stages(project)

    assert stages[0].command[-1] == (
        "-DCMAKE_TOOLCHAIN_FILE=packages/install/conan_toolchain.cmake"
    )


def test_build_never_compiles_after_failed_configure(tmp_path: Path) -> None:
    project = make_project(tmp_path)
    runner = FakeProcessRunner(results={CONFIGURE_PREFIX: ProcessResult(exit_code=1)})

    result = BuildOrchestrator(runner, _ignore).build(project)

    assert result.failed_stage == CONFIGURE_STAGE
    assert result.exit_code == 1
    assert len(runner.calls_starting_with(*COMPILE_PREFIX)) == 0


def test_build_reports_compile_failure_exit_code_verbatim(tmp_path: Path) -> None:
    project = make_project(tmp_path)
    runner = FakeProcessRunner(results={COMPILE_PREFIX: ProcessResult(exit_code=2)})

    result = BuildOrchestrator(runner, _ignore).build(project)

    assert result == PipelineResult(
        succeeded=False,
        exit_code=2,
        failed_stage=COMPILE_STAGE,
        completed_stages=(CONFIGURE_STAGE,),
    )


def test_raise_for_failure() -> None:
    PipelineResult(succeeded=True, exit_code=0).raise_for_failure()

    with pytest.raises(BuildStageFailed) as exc_info:
        PipelineResult(succeeded=False, exit_code=2, failed_stage=COMPILE_STAGE).raise_for_failure()

    assert exc_info.value.stage == COMPILE_STAGE
    assert exc_info.value.exit_code == 2


def test_run_executes_binary_after_build(tmp_path: Path) -> None:
    project = make_project(tmp_path)
    build_executable(project)
    runner = FakeProcessRunner()
    orchestrator = RunOrchestrator(BuildOrchestrator(runner, _ignore), runner)

    result = orchestrator.run(project, ["--flag"])

    assert result == PipelineResult(
        succeeded=True,
        exit_code=0,
        completed_stages=(CONFIGURE_STAGE, COMPILE_STAGE, EXECUTE_STAGE),
    )
    assert runner.interactive_calls == [
        ([str(project.executable_path), "--flag"], project.root)
    ]


def test_run_after_failed_configure_never_executes(tmp_path: Path) -> None:
    project = make_project(tmp_path)
    runner = FakeProcessRunner(results={CONFIGURE_PREFIX: ProcessResult(exit_code=1)})
    orchestrator = RunOrchestrator(BuildOrchestrator(runner, _ignore), runner)

    result = orchestrator.run(project)

    assert result.failed_stage == CONFIGURE_STAGE
    assert runner.interactive_calls == []


def test_run_missing_executable_after_successful_build(tmp_path: Path) -> None:
    project = make_project(tmp_path)
    runner = FakeProcessRunner()
    orchestrator = RunOrchestrator(BuildOrchestrator(runner, _ignore), runner)

    with pytest.raises(ExecutableNotFound) as exc_info:
        orchestrator.run(project)

    assert exc_info.value.path == project.executable_path
    assert runner.interactive_calls == []


def test_run_propagates_program_exit_code(tmp_path: Path) -> None:
    project = make_project(tmp_path)
    build_executable(project)
    runner = FakeProcessRunner(interactive_exit_code=42)
    orchestrator = RunOrchestrator(BuildOrchestrator(runner, _ignore), runner)

    result = orchestrator.run(project)

    assert result.succeeded is False
    assert result.failed_stage == EXECUTE_STAGE
    assert result.exit_code == 42


def test_run_uses_configured_executable(tmp_path: Path) -> None:
    project = make_project(tmp_path, sage_toml='[build]\nexecutable = "bin/app"\n')
    build_executable(project)
    runner = FakeProcessRunner()
    orchestrator = RunOrchestrator(BuildOrchestrator(runner, _ignore), runner)

    orchestrator.run(project)

    assert runner.interactive_calls[0][0] == [str(project.root / "build" / "bin" / "app")]


def test_signal_killed_stage_reports_shell_exit_status(tmp_path: Path) -> None:
    project = make_project(tmp_path)
    runner = FakeProcessRunner(results={COMPILE_PREFIX: ProcessResult(exit_code=-9)})

    result = BuildOrchestrator(runner, _ignore).build(project)

    assert result.exit_code == 137
    with pytest.raises(BuildStageFailed, match=r"exit code 137"):
        result.raise_for_failure()


def test_build_dir_exists_before_configure_runs(tmp_path: Path) -> None:
    project = make_project(tmp_path)
    seen: list[bool] = []
    runner = FakeProcessRunner(on_run=lambda command, cwd: seen.append(project.build_dir.is_dir()))

    BuildOrchestrator(runner, _ignore).build(project)

    assert seen == [True, True]


def test_dry_run_build_creates_no_build_dir(tmp_path: Path) -> None:
    project = make_project(tmp_path)

    BuildOrchestrator(FakeProcessRunner(), _ignore, dry_run=True).build(project)

    assert not project.build_dir.exists()


def test_stage_prepare_runs_before_command(tmp_path: Path) -> None:
    events: list[str] = []
    runner = FakeProcessRunner(on_run=lambda command, cwd: events.append("run"))
    stages = [Stage("one", ("tool",), tmp_path, prepare=lambda: events.append("prepare"))]

    run_stages(stages, runner, _ignore)

    assert events == ["prepare", "run"]
