"""External process interface.

Every external tool sage drives (conan, cmake, ninja, the compiled project
itself) is reached through this interface, following the ops pattern: an ABC
with a real subprocess-backed implementation, a dry-run wrapper, and an
in-memory fake for tests.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of one captured subprocess invocation."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class ProcessRunner(ABC):
    """Abstract interface for running external tools.

    This interface enables dependency injection for testing. The real
    implementation uses subprocess. Fake implementations record calls and
    return configured results without spawning anything.
    """

    @abstractmethod
    def which(self, tool: str) -> str | None:
        """Resolve a tool on the execution path.

        Args:
            tool: Executable name or path (e.g., "cmake")

        Returns:
            Absolute path to the executable, or None if it cannot be found
        """
        ...

    @abstractmethod
    def run(self, command: Sequence[str], cwd: Path) -> ProcessResult:
        """Run a command to completion, capturing stdout and stderr.

        Args:
            command: Executable and arguments
            cwd: Working directory for the subprocess

        Returns:
            ProcessResult with the exit code and decoded output streams

        Raises:
            ToolNotFound: If the executable cannot be started
        """
        ...

    @abstractmethod
    def run_interactive(self, command: Sequence[str], cwd: Path) -> int:
        """Run a command with inherited stdin/stdout/stderr.

        Used for the compiled project, which may be interactive.

        Returns:
            Exit code of the subprocess

        Raises:
            ToolNotFound: If the executable cannot be started
        """
        ...


def exit_status(returncode: int) -> int:
    """Exit status as a shell reports it.

    subprocess reports a child killed by signal N as -N; shells use 128 + N.
    """
    if returncode < 0:
        return 128 - returncode
    return returncode
