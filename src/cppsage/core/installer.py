"""Dependency installation through Conan.

The installer turns the RequirementSet into a throwaway conanfile.txt in the
project's dependency directory, runs `conan install` there, and only on
success regenerates the build description. A failed install never touches
the build description, so it always reflects a successfully installed set.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from cppsage.core.build_description import (
    BuildDescriptionDocument,
    LinkageSettings,
    plan_build_description,
    write_build_description,
)
from cppsage.core.errors import InstallationFailed
from cppsage.core.manifest import RequirementSet
from cppsage.core.process.abc import ProcessResult, ProcessRunner, exit_status
from cppsage.core.project_discovery import ProjectContext

logger = logging.getLogger(__name__)

CONANFILE_NAME = "conanfile.txt"
STDERR_EXCERPT_LINES = 20


@dataclass(frozen=True)
class InstallResult:
    """Outcome of a successful install.

    Attributes:
        requirements: The requirement set that was installed
        installer_ran: False when there was nothing to install
        build_description_updated: True if the file on disk changed
        document: The build description as it now reads (or would read, in
            dry-run mode)
    """

    requirements: RequirementSet
    installer_ran: bool
    build_description_updated: bool
    document: BuildDescriptionDocument


def render_conanfile(requirements: RequirementSet) -> str:
    lines = ["[requires]"]
    lines.extend(requirement.conan_reference() for requirement in requirements)
    lines.extend(["", "[generators]", "CMakeDeps", "CMakeToolchain", ""])
    return "\n".join(lines)


def stderr_excerpt(stderr: str, max_lines: int = STDERR_EXCERPT_LINES) -> str:
    """Last max_lines lines of stderr, unmodified."""
    return "\n".join(stderr.rstrip("\n").splitlines()[-max_lines:])


class DependencyInstaller:
    """Runs the dependency tool and keeps the build description in sync."""

    def __init__(
        self,
        runner: ProcessRunner,
        forward: Callable[[ProcessResult], None],
        *,
        dry_run: bool = False,
    ) -> None:
        self._runner = runner
        self._forward = forward
        self._dry_run = dry_run

    def install_command(self, project: ProjectContext) -> list[str]:
        return [
            project.config.tools.conan,
            "install",
            CONANFILE_NAME,
            "--build=missing",
            f"--output-folder={project.config.dependencies.install_dir}",
        ]

    def install(self, project: ProjectContext, requirements: RequirementSet) -> InstallResult:
        """Install requirements, then regenerate the build description.

        An empty requirement set skips the installer but still regenerates the
        managed region, so dependencies removed from the manifest are unlinked.

        Raises:
            InstallationFailed: If the installer exits non-zero
            MissingMarkers: If the build description lacks its markers
        """
        settings = LinkageSettings.for_project(project)
        path = project.build_description_path

        # Fail on missing markers before spending time on the install
        planned = plan_build_description(path, requirements, settings)

        installer_ran = False
        if requirements:
            self._run_installer(project, requirements)
            installer_ran = True
        else:
            logger.debug("No requirements declared, skipping installer")

        if self._dry_run:
            return InstallResult(
                requirements=requirements,
                installer_ran=installer_ran,
                build_description_updated=False,
                document=planned,
            )

        updated = write_build_description(path, requirements, settings)
        return InstallResult(
            requirements=requirements,
            installer_ran=installer_ran,
            build_description_updated=updated,
            document=planned,
        )

    def _run_installer(self, project: ProjectContext, requirements: RequirementSet) -> None:
        lock_dir = project.lock_dir
        command = self.install_command(project)

        if self._dry_run:
            self._runner.run(command, lock_dir)
            return

        lock_dir.mkdir(parents=True, exist_ok=True)
        conanfile = lock_dir / CONANFILE_NAME
        conanfile.write_text(render_conanfile(requirements), encoding="utf-8")
        logger.debug("Generated %s with %d requirement(s)", conanfile, len(requirements))
        try:
            result = self._runner.run(command, lock_dir)
        finally:
            _remove_if_present(conanfile)

        self._forward(result)
        if not result.succeeded:
            raise InstallationFailed(exit_status(result.exit_code), stderr_excerpt(result.stderr))


def _remove_if_present(path: Path) -> None:
    if path.exists():
        path.unlink()
