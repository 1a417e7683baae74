"""Error taxonomy for the sage pipelines.

Every error carries the process exit code the CLI should terminate with.
The CLI error boundary (see cppsage.cli.error_boundary) renders them as a single
red "Error:" line; third-party diagnostics are forwarded before the error is
raised and are never folded into these messages.
"""

from pathlib import Path


class SageError(Exception):
    """Base class for errors that terminate a sage command cleanly."""

    exit_code: int = 1


class ManifestNotFound(SageError):
    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"{path} not found. Are you in the project root?")


class MalformedManifest(SageError):
    def __init__(self, source: str, line_number: int, line: str, reason: str) -> None:
        self.source = source
        self.line_number = line_number
        self.line = line
        super().__init__(f"{source}:{line_number}: {reason}: {line!r}")


class MissingMarkers(SageError):
    def __init__(self, source: str, missing: list[str]) -> None:
        self.source = source
        self.missing = missing
        markers = ", ".join(repr(marker) for marker in missing)
        super().__init__(f"Could not find dependency marker(s) {markers} in {source}")


class InstallationFailed(SageError):
    def __init__(self, exit_code: int, stderr_excerpt: str) -> None:
        self.exit_code = exit_code if exit_code != 0 else 1
        self.stderr_excerpt = stderr_excerpt
        super().__init__(f"Dependency installation failed (exit code {exit_code})")


class BuildStageFailed(SageError):
    def __init__(self, stage: str, exit_code: int) -> None:
        self.stage = stage
        self.exit_code = exit_code if exit_code != 0 else 1
        super().__init__(f"Stage '{stage}' failed (exit code {exit_code})")


class ExecutableNotFound(SageError):
    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Executable not found at: {path}")


class ToolNotFound(SageError):
    """Raised when an external tool cannot be resolved on PATH.

    `sage doctor` treats this as a table row; pipeline commands treat it as fatal.
    """

    exit_code = 127

    def __init__(self, tool: str) -> None:
        self.tool = tool
        super().__init__(f"'{tool}' was not found on PATH. Run 'sage doctor' for details.")


class ProjectExistsError(SageError):
    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Directory '{path}' already exists.")
