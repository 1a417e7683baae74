"""Marker-delimited rewriting of the project's build description.

The build description (the project's CMakeLists.txt) is modeled as three
regions:

    prefix   - everything up to and including the begin-marker line
    managed  - the dependency linkage lines, owned by sage
    suffix   - everything from the end-marker line to the end of file

Only the managed region is ever regenerated. Prefix and suffix are carried
as the exact text read from disk, line endings included. Rewriting is a
plain string operation, so it does not depend on CMake syntax beyond the
linkage line template.
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from cppsage.core.errors import MissingMarkers
from cppsage.core.manifest import RequirementSet
from cppsage.core.project_discovery import ProjectContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildDescriptionDocument:
    prefix: str
    managed: str
    suffix: str

    @property
    def text(self) -> str:
        return self.prefix + self.managed + self.suffix

    @property
    def newline(self) -> str:
        """Line ending used by the marker lines."""
        return "\r\n" if self.prefix.endswith("\r\n") else "\n"


@dataclass(frozen=True)
class LinkageSettings:
    """How requirements are rendered into the managed region.

    Attributes:
        target: CMake target the dependencies are linked to
        begin_marker: Line opening the managed region
        end_marker: Line closing the managed region
        line_template: Format string for one linkage line. Available fields:
            {target}, {name}, {reference}
    """

    target: str
    begin_marker: str
    end_marker: str
    line_template: str

    @staticmethod
    def for_project(project: ProjectContext) -> "LinkageSettings":
        deps = project.config.dependencies
        return LinkageSettings(
            target=project.name,
            begin_marker=deps.begin_marker,
            end_marker=deps.end_marker,
            line_template=deps.link_template,
        )


def split_document(
    text: str, begin_marker: str, end_marker: str, source: str = "build description"
) -> BuildDescriptionDocument:
    """Split text into prefix, managed and suffix regions.

    Marker lines are matched on their stripped content, so indentation is
    allowed. The end marker must follow the begin marker.

    Raises:
        MissingMarkers: If either marker line cannot be found
    """
    lines = text.splitlines(keepends=True)

    begin_end_offset: int | None = None
    end_start_offset: int | None = None
    offset = 0
    for line in lines:
        stripped = line.strip()
        if begin_end_offset is None:
            if stripped == begin_marker:
                begin_end_offset = offset + len(line)
        elif stripped == end_marker:
            end_start_offset = offset
            break
        offset += len(line)

    if begin_end_offset is None or end_start_offset is None:
        missing: list[str] = []
        if begin_end_offset is None:
            missing.append(begin_marker)
        # Without a begin marker the scan never looked for the end marker
        end_present = any(line.strip() == end_marker for line in lines)
        if end_start_offset is None and (begin_end_offset is not None or not end_present):
            missing.append(end_marker)
        raise MissingMarkers(source, missing)

    return BuildDescriptionDocument(
        prefix=text[:begin_end_offset],
        managed=text[begin_end_offset:end_start_offset],
        suffix=text[end_start_offset:],
    )


def render_managed(
    requirements: RequirementSet, settings: LinkageSettings, newline: str = "\n"
) -> str:
    """Render exactly one linkage line per requirement, in manifest order."""
    return "".join(
        settings.line_template.format(
            target=settings.target,
            name=requirement.name,
            reference=requirement.reference,
        )
        + newline
        for requirement in requirements
    )


def apply_requirements(
    document: BuildDescriptionDocument,
    requirements: RequirementSet,
    settings: LinkageSettings,
) -> BuildDescriptionDocument:
    """Return a copy of document whose managed region reflects requirements."""
    return BuildDescriptionDocument(
        prefix=document.prefix,
        managed=render_managed(requirements, settings, document.newline),
        suffix=document.suffix,
    )


def fresh_document(settings: LinkageSettings) -> BuildDescriptionDocument:
    """Template used when the project has no build description yet."""
    prefix = (
        f"add_executable({settings.target}\n"
        "    src/main.cpp\n"
        ")\n"
        "\n"
        f"target_include_directories({settings.target} PUBLIC\n"
        '    "${CMAKE_CURRENT_SOURCE_DIR}/include"\n'
        ")\n"
        "\n"
        f"{settings.begin_marker}\n"
    )
    return BuildDescriptionDocument(prefix=prefix, managed="", suffix=f"{settings.end_marker}\n")


def load_document(path: Path, settings: LinkageSettings) -> BuildDescriptionDocument:
    """Read the document at path, or the fresh template if it does not exist."""
    if not path.exists():
        return fresh_document(settings)
    text = path.read_bytes().decode("utf-8")
    return split_document(text, settings.begin_marker, settings.end_marker, source=str(path))


def plan_build_description(
    path: Path, requirements: RequirementSet, settings: LinkageSettings
) -> BuildDescriptionDocument:
    """Compute the updated document without touching the filesystem."""
    return apply_requirements(load_document(path, settings), requirements, settings)


def write_build_description(
    path: Path, requirements: RequirementSet, settings: LinkageSettings
) -> bool:
    """Regenerate the managed region of the build description at path.

    The file is replaced atomically. A file that would not change is left
    untouched.

    Returns:
        True if the file was written, False if it was already up to date

    Raises:
        MissingMarkers: If an existing file lacks either marker line
    """
    existed = path.exists()
    current = load_document(path, settings)
    updated = apply_requirements(current, requirements, settings)

    if existed and updated.text == current.text:
        logger.debug("%s already up to date", path)
        return False

    path.parent.mkdir(parents=True, exist_ok=True)
    atomic_write_bytes(path, updated.text.encode("utf-8"))
    logger.debug("Wrote %d linkage line(s) to %s", len(requirements), path)
    return True


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write data to a temporary file beside path, then rename it over path."""
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        if path.exists():
            os.chmod(tmp_path, path.stat().st_mode & 0o7777)
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
