"""No-op wrapper that prints commands instead of executing them."""

from collections.abc import Sequence
from pathlib import Path

import click

from cppsage.cli.output import user_output
from cppsage.core.process.abc import ProcessResult, ProcessRunner


class DryRunProcessRunner(ProcessRunner):
    """Wrapper that prints dry-run messages instead of running tools.

    Tool resolution is delegated to the wrapped runner so `doctor` still
    reports real availability.
    """

    def __init__(self, wrapped: ProcessRunner) -> None:
        self._wrapped = wrapped

    def which(self, tool: str) -> str | None:
        return self._wrapped.which(tool)

    def run(self, command: Sequence[str], cwd: Path) -> ProcessResult:
        self._print(command, cwd)
        return ProcessResult(exit_code=0)

    def run_interactive(self, command: Sequence[str], cwd: Path) -> int:
        self._print(command, cwd)
        return 0

    def _print(self, command: Sequence[str], cwd: Path) -> None:
        cmd_str = " ".join(str(arg) for arg in command)
        user_output(click.style("[DRY RUN] ", fg="yellow") + f"Would run: {cmd_str} (in {cwd})")
