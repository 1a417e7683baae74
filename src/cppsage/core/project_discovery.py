"""Project root discovery and derived paths."""

import os
from dataclasses import dataclass
from pathlib import Path

from cppsage.core.config import CONFIG_FILE_NAME, SageConfig, load_config


@dataclass(frozen=True)
class ProjectContext:
    """Represents a sage project and the paths derived from its config.

    Attributes:
        root: Project root directory (where sage.toml lives, or the cwd)
        name: Project name, also the CMake target and executable name
        config: Loaded configuration
    """

    root: Path
    name: str
    config: SageConfig

    @property
    def manifest_path(self) -> Path:
        return self.root / self.config.dependencies.manifest

    @property
    def lock_dir(self) -> Path:
        return self.root / self.config.dependencies.lock_dir

    @property
    def build_description_path(self) -> Path:
        relative = self.config.dependencies.build_description.format(project=self.name)
        return self.root / relative

    @property
    def build_dir(self) -> Path:
        return self.root / self.config.build.dir

    @property
    def toolchain_path(self) -> Path:
        return self.root / self.config.build.toolchain

    @property
    def executable_path(self) -> Path:
        """Fixed location of the produced binary.

        <build_dir>/<name>/<name>, with the platform executable suffix, unless
        [build] executable overrides it.
        """
        if self.config.build.executable is not None:
            return self.build_dir / self.config.build.executable
        return self.build_dir / self.name / executable_name(self.name)


def executable_name(target: str) -> str:
    return f"{target}.exe" if os.name == "nt" else target


def find_project_root(start: Path) -> Path | None:
    """Walk up from start looking for sage.toml."""
    for candidate in (start, *start.parents):
        if (candidate / CONFIG_FILE_NAME).exists():
            return candidate
    return None


def discover_project(cwd: Path) -> ProjectContext:
    """Discover the project containing cwd.

    Projects without a sage.toml are supported: cwd becomes the root and
    its directory name the project name.
    """
    root = find_project_root(cwd)
    if root is None:
        root = cwd
    config = load_config(root)
    name = config.project_name if config.project_name is not None else root.name
    return ProjectContext(root=root, name=name, config=config)
