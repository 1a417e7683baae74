"""Sequential stage pipelines for building and running a project.

A pipeline is an explicit ordered list of stages. Each stage is one external
invocation; the next stage starts only if the previous one exited 0. The first
failure ends the pipeline and is reported with the stage name and the tool's
exit code, unchanged.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from cppsage.core.errors import BuildStageFailed, ExecutableNotFound
from cppsage.core.process.abc import ProcessResult, ProcessRunner, exit_status
from cppsage.core.project_discovery import ProjectContext

logger = logging.getLogger(__name__)

CONFIGURE_STAGE = "configure"
COMPILE_STAGE = "compile"
EXECUTE_STAGE = "execute"


@dataclass(frozen=True)
class Stage:
    """One external invocation.

    prepare, when set, runs right before the command (e.g. creating the build
    directory the configure step writes into).
    """

    name: str
    command: tuple[str, ...]
    cwd: Path
    prepare: Callable[[], None] | None = field(default=None, compare=False)


@dataclass(frozen=True)
class PipelineResult:
    """Terminal outcome of a multi-stage orchestration."""

    succeeded: bool
    exit_code: int
    failed_stage: str | None = None
    completed_stages: tuple[str, ...] = ()

    def raise_for_failure(self) -> None:
        """Raise BuildStageFailed if a stage failed."""
        if not self.succeeded:
            raise BuildStageFailed(self.failed_stage or "unknown", self.exit_code)


def run_stages(
    stages: Sequence[Stage],
    runner: ProcessRunner,
    forward: Callable[[ProcessResult], None],
    on_stage_start: Callable[[Stage], None] | None = None,
) -> PipelineResult:
    """Run stages in order, stopping at the first non-zero exit.

    Args:
        stages: Stages to run, in order
        runner: Process runner used for every stage
        forward: Receives each stage's captured output for verbatim relay
        on_stage_start: Called before each stage starts

    Returns:
        PipelineResult naming the failed stage, or success with exit code 0
    """
    completed: list[str] = []
    for stage in stages:
        logger.debug("Starting stage %s: %s", stage.name, " ".join(stage.command))
        if on_stage_start is not None:
            on_stage_start(stage)
        if stage.prepare is not None:
            stage.prepare()
        result = runner.run(stage.command, stage.cwd)
        forward(result)
        if not result.succeeded:
            logger.debug("Stage %s failed with exit code %d", stage.name, result.exit_code)
            return PipelineResult(
                succeeded=False,
                exit_code=exit_status(result.exit_code),
                failed_stage=stage.name,
                completed_stages=tuple(completed),
            )
        completed.append(stage.name)

    return PipelineResult(succeeded=True, exit_code=0, completed_stages=tuple(completed))


def _ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


class BuildOrchestrator:
    """Configure with the build generator, then compile with the build driver."""

    def __init__(
        self,
        runner: ProcessRunner,
        forward: Callable[[ProcessResult], None],
        on_stage_start: Callable[[Stage], None] | None = None,
        *,
        dry_run: bool = False,
    ) -> None:
        self._runner = runner
        self._forward = forward
        self._on_stage_start = on_stage_start
        self._dry_run = dry_run

    def stages(self, project: ProjectContext) -> list[Stage]:
        config = project.config
        build_dir = config.build.dir
        configure = [config.tools.cmake, "-S", ".", "-B", build_dir, "-G", config.build.generator]
        # Without a toolchain the project still configures when it has no dependencies
        if project.toolchain_path.exists():
            configure.append(f"-DCMAKE_TOOLCHAIN_FILE={config.build.toolchain}")

        return [
            Stage(
                name=CONFIGURE_STAGE,
                command=tuple(configure),
                cwd=project.root,
                prepare=None if self._dry_run else lambda: _ensure_dir(project.build_dir),
            ),
            Stage(
                name=COMPILE_STAGE,
                command=(config.tools.cmake, "--build", build_dir),
                cwd=project.root,
            ),
        ]

    def build(self, project: ProjectContext) -> PipelineResult:
        return run_stages(self.stages(project), self._runner, self._forward, self._on_stage_start)


class RunOrchestrator:
    """Build the project, then execute the produced binary."""

    def __init__(
        self,
        build: BuildOrchestrator,
        runner: ProcessRunner,
        *,
        dry_run: bool = False,
    ) -> None:
        self._build = build
        self._runner = runner
        self._dry_run = dry_run

    def locate_executable(self, project: ProjectContext) -> Path:
        """Return the produced binary's path.

        Raises:
            ExecutableNotFound: If nothing exists at the conventional location
        """
        path = project.executable_path
        if not self._dry_run and not path.is_file():
            raise ExecutableNotFound(path)
        return path

    def run(self, project: ProjectContext, args: Sequence[str] = ()) -> PipelineResult:
        """Build, locate and execute.

        A failed build is returned as-is; nothing is located or executed.

        Returns:
            PipelineResult whose exit code is the program's exit code

        Raises:
            ExecutableNotFound: If the build succeeded but produced no binary
        """
        build_result = self._build.build(project)
        if not build_result.succeeded:
            return build_result

        executable = self.locate_executable(project)
        logger.debug("Executing %s", executable)
        returncode = self._runner.run_interactive([str(executable), *args], project.root)
        exit_code = exit_status(returncode)

        completed = build_result.completed_stages
        if exit_code != 0:
            return PipelineResult(
                succeeded=False,
                exit_code=exit_code,
                failed_stage=EXECUTE_STAGE,
                completed_stages=completed,
            )
        return PipelineResult(
            succeeded=True, exit_code=0, completed_stages=(*completed, EXECUTE_STAGE)
        )
