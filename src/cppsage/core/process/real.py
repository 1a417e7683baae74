"""Real process execution using subprocess."""

import logging
import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path

from cppsage.core.errors import ToolNotFound
from cppsage.core.process.abc import ProcessResult, ProcessRunner

logger = logging.getLogger(__name__)


class RealProcessRunner(ProcessRunner):
    """Production implementation using subprocess.run().

    No timeouts are applied. A KeyboardInterrupt while waiting propagates to
    the caller; subprocess.run() kills the child before re-raising.
    """

    def which(self, tool: str) -> str | None:
        return shutil.which(tool)

    def run(self, command: Sequence[str], cwd: Path) -> ProcessResult:
        cmd = [str(arg) for arg in command]
        logger.debug("Running %s in %s", " ".join(cmd), cwd)
        try:
            completed = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except FileNotFoundError as e:
            raise ToolNotFound(cmd[0]) from e

        logger.debug("%s exited with %d", cmd[0], completed.returncode)
        return ProcessResult(
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )

    def run_interactive(self, command: Sequence[str], cwd: Path) -> int:
        cmd = [str(arg) for arg in command]
        logger.debug("Running %s interactively in %s", " ".join(cmd), cwd)
        try:
            completed = subprocess.run(cmd, cwd=cwd, check=False)
        except FileNotFoundError as e:
            raise ToolNotFound(cmd[0]) from e

        logger.debug("%s exited with %d", cmd[0], completed.returncode)
        return completed.returncode
