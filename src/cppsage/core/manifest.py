"""Dependency manifest parsing.

The manifest (`packages/requirements.txt` by default) lists one requirement
per line:

    # comments and blank lines are ignored
    fmt/10.2.1
    libfoo>=1.2
    spdlog            # trailing comments are allowed

Parsing produces a RequirementSet: declaration order is kept and a name
declared twice keeps its first position but takes its last constraint.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from cppsage.core.errors import MalformedManifest, ManifestNotFound

COMMENT_MARKER = "#"

_NAME_RE = re.compile(r"[A-Za-z0-9_][A-Za-z0-9_.+-]*")
_COMPARISON_OPERATORS = frozenset({"==", ">=", "<=", "!=", "~=", ">", "<", "="})
_REFERENCE_SEPARATORS = ("/", "@")
_INLINE_COMMENT_RE = re.compile(r"\s+#.*$")


@dataclass(frozen=True)
class PackageRequirement:
    """One manifest entry.

    Attributes:
        name: Package name, unique within a RequirementSet
        version_constraint: Text following the name as written (e.g. ">=1.2",
            "/10.2.1"), or None for an unconstrained requirement
    """

    name: str
    version_constraint: str | None = None

    @property
    def reference(self) -> str:
        """The requirement as written in the manifest, whitespace removed."""
        return self.name + (self.version_constraint or "")

    def conan_reference(self) -> str:
        """Render the requirement as a Conan reference.

        Conan-native references pass through; comparison operators become a
        version range and a pinned version becomes name/version.
        """
        constraint = self.version_constraint
        if constraint is None:
            return self.name
        if constraint.startswith(("/", "@")):
            return self.name + constraint
        if constraint.startswith("=="):
            return f"{self.name}/{constraint[2:]}"
        if constraint.startswith("="):
            return f"{self.name}/{constraint[1:]}"
        if constraint.startswith("~="):
            return f"{self.name}/[~{constraint[2:]}]"
        return f"{self.name}/[{constraint}]"


class RequirementSet:
    """Ordered requirements, deduplicated by name (last occurrence wins)."""

    def __init__(self, requirements: list[PackageRequirement] | None = None) -> None:
        self._by_name: dict[str, PackageRequirement] = {}
        for requirement in requirements or []:
            self._by_name[requirement.name] = requirement

    def __iter__(self) -> Iterator[PackageRequirement]:
        return iter(self._by_name.values())

    def __len__(self) -> int:
        return len(self._by_name)

    def __bool__(self) -> bool:
        return bool(self._by_name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RequirementSet):
            return NotImplemented
        return list(self) == list(other)

    def __repr__(self) -> str:
        return f"RequirementSet({list(self)!r})"

    def get(self, name: str) -> PackageRequirement | None:
        return self._by_name.get(name)

    def names(self) -> list[str]:
        return list(self._by_name)


def _parse_line(source: str, line_number: int, raw_line: str) -> PackageRequirement | None:
    line = raw_line.strip()
    if not line or line.startswith(COMMENT_MARKER):
        return None

    line = _INLINE_COMMENT_RE.sub("", line)

    match = _NAME_RE.match(line)
    if match is None:
        raise MalformedManifest(source, line_number, raw_line.strip(), "invalid package name")

    name = match.group(0)
    rest = line[match.end() :].strip()
    if not rest:
        return PackageRequirement(name=name)

    if rest.startswith(_REFERENCE_SEPARATORS):
        operator, version = rest[0], rest[1:].strip()
    else:
        version = rest.lstrip("=<>!~")
        operator = rest[: len(rest) - len(version)]
        version = version.strip()
        if operator not in _COMPARISON_OPERATORS:
            raise MalformedManifest(source, line_number, raw_line.strip(), "invalid version spec")

    if not version:
        raise MalformedManifest(source, line_number, raw_line.strip(), "missing version")
    if any(ch.isspace() for ch in version):
        raise MalformedManifest(source, line_number, raw_line.strip(), "unexpected whitespace")

    return PackageRequirement(name=name, version_constraint=operator + version)


def parse_manifest(text: str, source: str = "requirements.txt") -> RequirementSet:
    """Parse manifest text into a RequirementSet.

    Args:
        text: Raw manifest content
        source: Name used in error messages

    Raises:
        MalformedManifest: If a line is neither blank, a comment, nor a requirement
    """
    requirements: list[PackageRequirement] = []
    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        requirement = _parse_line(source, line_number, raw_line)
        if requirement is not None:
            requirements.append(requirement)
    return RequirementSet(requirements)


def read_manifest(path: Path) -> RequirementSet:
    """Read and parse the manifest at path.

    Raises:
        ManifestNotFound: If the file does not exist
        MalformedManifest: If a line cannot be parsed
    """
    if not path.exists():
        raise ManifestNotFound(path)
    return parse_manifest(path.read_text(encoding="utf-8-sig"), source=str(path))


def read_manifest_or_empty(path: Path) -> RequirementSet:
    """Like read_manifest, but a missing manifest means no dependencies."""
    if not path.exists():
        return RequirementSet()
    return read_manifest(path)
