"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from cppsage.core.process.abc import ProcessRunner
from cppsage.core.process.dry_run import DryRunProcessRunner
from cppsage.core.process.real import RealProcessRunner
from cppsage.core.project_discovery import ProjectContext, discover_project
from cppsage.core.user_feedback import InteractiveFeedback, SuppressedFeedback, UserFeedback


@dataclass(frozen=True)
class SageContext:
    """Immutable context holding all dependencies for sage operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.

    The project is discovered lazily through project(): `sage new` and
    `sage doctor` work outside any project, and a malformed sage.toml should
    only fail commands that need it.
    """

    runner: ProcessRunner
    feedback: UserFeedback
    cwd: Path  # Current working directory at CLI invocation
    dry_run: bool
    project_override: ProjectContext | None = None

    def project(self) -> ProjectContext:
        """Return the project containing cwd.

        Raises:
            ValueError: If sage.toml is malformed
        """
        if self.project_override is not None:
            return self.project_override
        return discover_project(self.cwd)

    @staticmethod
    def for_test(
        runner: ProcessRunner | None = None,
        feedback: UserFeedback | None = None,
        cwd: Path | None = None,
        project: ProjectContext | None = None,
        dry_run: bool = False,
    ) -> "SageContext":
        """Create test context with optional pre-configured fakes.

        Args:
            runner: Optional ProcessRunner. If None, creates an empty FakeProcessRunner.
            feedback: Optional UserFeedback. If None, creates FakeUserFeedback.
            cwd: Optional working directory. If None, uses Path("/test/default/cwd").
            project: Optional ProjectContext. If None, the project is discovered
                from cwd when a command asks for it.
            dry_run: Whether to enable dry-run mode (default False).

        Example:
            >>> runner = FakeProcessRunner(results={("cmake", "-S"): ProcessResult(1)})
            >>> ctx = SageContext.for_test(runner=runner, cwd=tmp_path)
            >>> result = CliRunner().invoke(cli, ["compile"], obj=ctx)
        """
        from tests.fakes.process_runner import FakeProcessRunner
        from tests.fakes.user_feedback import FakeUserFeedback

        if runner is None:
            runner = FakeProcessRunner()

        if feedback is None:
            feedback = FakeUserFeedback()

        if cwd is None:
            cwd = Path("/test/default/cwd")

        return SageContext(
            runner=runner,
            feedback=feedback,
            cwd=cwd,
            dry_run=dry_run,
            project_override=project,
        )


def create_context(*, dry_run: bool, quiet: bool = False) -> SageContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.

    Args:
        dry_run: If True, wrap the runner with a printing no-op
        quiet: If True, suppress informational feedback
    """
    runner: ProcessRunner = RealProcessRunner()
    if dry_run:
        runner = DryRunProcessRunner(runner)

    feedback: UserFeedback = SuppressedFeedback() if quiet else InteractiveFeedback()

    return SageContext(
        runner=runner,
        feedback=feedback,
        cwd=Path.cwd(),
        dry_run=dry_run,
    )
