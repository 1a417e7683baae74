"""Project configuration loaded from `sage.toml`.

Example config:
  [project]
  name = "demo"

  [tools]
  cmake = "cmake"
  conan = "conan"

  [build]
  dir = "build"
  generator = "Ninja"

  [dependencies]
  manifest = "packages/requirements.txt"
  build_description = "{project}/CMakeLists.txt"

Every key is optional; a missing file yields the defaults, which match the
layout produced by `sage new`.
"""

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomlkit

CONFIG_FILE_NAME = "sage.toml"

DEFAULT_BEGIN_MARKER = "# cppsage:dependencies_start"
DEFAULT_END_MARKER = "# cppsage:dependencies_end"
DEFAULT_LINK_TEMPLATE = "sage_link_dependency({target} {name})"


@dataclass(frozen=True)
class ToolsConfig:
    """Executable names (or paths) of the external tools."""

    cmake: str = "cmake"
    ninja: str = "ninja"
    conan: str = "conan"
    compiler: str = "clang"


@dataclass(frozen=True)
class BuildConfig:
    dir: str = "build"
    generator: str = "Ninja"
    toolchain: str = "packages/install/conan_toolchain.cmake"
    # Relative to the build dir; None means <project>/<project>[.exe]
    executable: str | None = None


@dataclass(frozen=True)
class DependenciesConfig:
    manifest: str = "packages/requirements.txt"
    lock_dir: str = "packages"
    install_dir: str = "install"
    build_description: str = "{project}/CMakeLists.txt"
    begin_marker: str = DEFAULT_BEGIN_MARKER
    end_marker: str = DEFAULT_END_MARKER
    link_template: str = DEFAULT_LINK_TEMPLATE


@dataclass(frozen=True)
class SageConfig:
    """In-memory representation of `sage.toml`."""

    project_name: str | None = None
    tools: ToolsConfig = field(default_factory=ToolsConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    dependencies: DependenciesConfig = field(default_factory=DependenciesConfig)


def _section(data: dict[str, Any], name: str, cfg_path: Path) -> dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ValueError(f"[{name}] in {cfg_path} must be a table")
    return section


def _strings(
    section: dict[str, Any], name: str, allowed: set[str], cfg_path: Path
) -> dict[str, str]:
    values: dict[str, str] = {}
    for key, value in section.items():
        if key not in allowed:
            raise ValueError(f"Unknown key '{key}' in [{name}] of {cfg_path}")
        if not isinstance(value, str):
            raise ValueError(f"'{name}.{key}' in {cfg_path} must be a string")
        values[key] = value
    return values


def _check_link_template(template: str, cfg_path: Path) -> None:
    escape_hint = "write literal braces as {{ and }}"
    try:
        template.format(target="target", name="name", reference="reference")
    except KeyError as e:
        raise ValueError(
            f"Unknown placeholder {{{e.args[0]}}} in dependencies.link_template of {cfg_path}: "
            f"use {{target}}, {{name}} or {{reference}}, and {escape_hint}"
        ) from e
    except (AttributeError, IndexError, ValueError) as e:
        raise ValueError(
            f"Invalid dependencies.link_template in {cfg_path} ({e}): {escape_hint}"
        ) from e


def load_config(project_root: Path) -> SageConfig:
    """Load sage.toml from the project root if present; otherwise return defaults.

    Raises:
        ValueError: If the file has unknown keys, values of the wrong type, or a
            link_template that cannot be formatted
    """
    cfg_path = project_root / CONFIG_FILE_NAME
    if not cfg_path.exists():
        return SageConfig()

    try:
        data = tomllib.loads(cfg_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {cfg_path}: {e}") from e

    project = _strings(_section(data, "project", cfg_path), "project", {"name"}, cfg_path)
    tools = _strings(
        _section(data, "tools", cfg_path),
        "tools",
        set(ToolsConfig.__dataclass_fields__),
        cfg_path,
    )
    build = _strings(
        _section(data, "build", cfg_path),
        "build",
        set(BuildConfig.__dataclass_fields__),
        cfg_path,
    )
    deps = _strings(
        _section(data, "dependencies", cfg_path),
        "dependencies",
        set(DependenciesConfig.__dataclass_fields__),
        cfg_path,
    )

    if "link_template" in deps:
        _check_link_template(deps["link_template"], cfg_path)

    return SageConfig(
        project_name=project.get("name"),
        tools=ToolsConfig(**tools),
        build=BuildConfig(**build),
        dependencies=DependenciesConfig(**deps),
    )


def save_config(project_root: Path, config: SageConfig) -> None:
    """Save SageConfig to sage.toml.

    Only values that differ from the defaults are written, so generated files
    stay short and keep picking up new defaults.
    """
    doc = tomlkit.document()
    doc.add(tomlkit.comment("sage project configuration"))

    if config.project_name is not None:
        project = tomlkit.table()
        project["name"] = config.project_name
        doc["project"] = project

    sections: list[tuple[str, Any, Any]] = [
        ("tools", config.tools, ToolsConfig()),
        ("build", config.build, BuildConfig()),
        ("dependencies", config.dependencies, DependenciesConfig()),
    ]
    for name, current, default in sections:
        table = tomlkit.table()
        for key in type(current).__dataclass_fields__:
            value = getattr(current, key)
            if value is not None and value != getattr(default, key):
                table[key] = value
        if table:
            doc[name] = table

    (project_root / CONFIG_FILE_NAME).write_text(tomlkit.dumps(doc), encoding="utf-8")
