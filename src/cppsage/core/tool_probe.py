"""Presence and version checks for the external toolchain."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from cppsage.core.config import ToolsConfig
from cppsage.core.errors import ToolNotFound
from cppsage.core.process.abc import ProcessRunner

logger = logging.getLogger(__name__)

VS_BUILD_TOOLS_HINT = "Install from: https://visualstudio.microsoft.com/visual-cpp-build-tools/"


@dataclass(frozen=True)
class ToolSpec:
    """A tool sage needs, and how to ask it for its version."""

    display_name: str
    executable: str
    version_args: tuple[str, ...]
    install_hint: str


@dataclass(frozen=True)
class ToolAvailability:
    tool_name: str
    found: bool
    version: str | None = None
    path: str | None = None
    install_hint: str = ""


def _vswhere_path() -> Path:
    program_files = os.environ.get("ProgramFiles(x86)", "C:\\Program Files (x86)")
    return Path(program_files) / "Microsoft Visual Studio" / "Installer" / "vswhere.exe"


def required_tools(tools: ToolsConfig, *, windows: bool | None = None) -> list[ToolSpec]:
    """The tools `doctor` checks, in display order.

    Args:
        tools: Configured executable names
        windows: Override platform detection (defaults to os.name == "nt")
    """
    if windows is None:
        windows = os.name == "nt"

    specs = [
        ToolSpec("cmake", tools.cmake, ("--version",), "winget install Kitware.CMake"),
        ToolSpec("ninja", tools.ninja, ("--version",), "winget install Kitware.Ninja"),
        ToolSpec("conan", tools.conan, ("--version",), "pip install conan"),
        ToolSpec(tools.compiler, tools.compiler, ("--version",), "winget install LLVM.LLVM"),
    ]
    if windows:
        specs.append(
            ToolSpec(
                "Visual Studio Build Tools",
                str(_vswhere_path()),
                ("-latest", "-property", "displayName"),
                VS_BUILD_TOOLS_HINT,
            )
        )
    return specs


class ToolProbe:
    """Checks every required tool; a missing tool is reported, never raised."""

    def __init__(self, runner: ProcessRunner, cwd: Path) -> None:
        self._runner = runner
        self._cwd = cwd

    def probe(self, spec: ToolSpec) -> ToolAvailability:
        path = self._runner.which(spec.executable)
        if path is None:
            logger.debug("%s not found on PATH", spec.executable)
            return ToolAvailability(
                tool_name=spec.display_name, found=False, install_hint=spec.install_hint
            )

        return ToolAvailability(
            tool_name=spec.display_name,
            found=True,
            version=self._query_version(path, spec.version_args),
            path=path,
            install_hint=spec.install_hint,
        )

    def probe_all(self, specs: list[ToolSpec]) -> list[ToolAvailability]:
        return [self.probe(spec) for spec in specs]

    def _query_version(self, path: str, version_args: tuple[str, ...]) -> str | None:
        try:
            result = self._runner.run([path, *version_args], self._cwd)
        except ToolNotFound:
            return None
        if not result.succeeded:
            return None

        for line in result.stdout.splitlines():
            if line.strip():
                return line.strip()
        return None
