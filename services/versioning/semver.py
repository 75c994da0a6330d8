"""Plain ``MAJOR.MINOR.PATCH`` version records and bump arithmetic."""

from __future__ import annotations

import re
from dataclasses import dataclass, field as dataclass_field
from enum import Enum
from pathlib import Path

from packaging.version import Version

from domain.build.errors import InvalidVersionFormat

STAGE = "version-sync"
_VERSION_PATTERN = re.compile(r"[0-9]+\.[0-9]+\.[0-9]+")


class BumpKind(str, Enum):
    """Version component to increment."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


@dataclass(frozen=True, order=True)
class VersionRecord:
    major: int
    minor: int
    patch: int
    # Parsed text, kept so a validated version is written back exactly as given.
    text: str | None = dataclass_field(default=None, compare=False, repr=False)

    @classmethod
    def parse(
        cls,
        text: str | None,
        *,
        stage: str = STAGE,
        path: Path | str | None = None,
        field: str | None = "version",
    ) -> "VersionRecord":
        """Parse ``text``; raises :class:`InvalidVersionFormat` when malformed."""

        if not isinstance(text, str) or not _VERSION_PATTERN.fullmatch(text):
            raise InvalidVersionFormat(
                f"Invalid version format: {text!r} (expected MAJOR.MINOR.PATCH)",
                stage=stage,
                path=path,
                field=field,
            )
        major, minor, patch = (int(part) for part in text.split("."))
        return cls(major, minor, patch, text)

    def bump(self, kind: BumpKind | str) -> "VersionRecord":
        kind = BumpKind(kind)
        if kind is BumpKind.MAJOR:
            return VersionRecord(self.major + 1, 0, 0)
        if kind is BumpKind.MINOR:
            return VersionRecord(self.major, self.minor + 1, 0)
        return VersionRecord(self.major, self.minor, self.patch + 1)

    def as_packaging_version(self) -> Version:
        return Version(str(self))

    def __str__(self) -> str:
        if self.text is not None:
            return self.text
        return f"{self.major}.{self.minor}.{self.patch}"


def is_valid_version(text: str) -> bool:
    return bool(_VERSION_PATTERN.fullmatch(text))


def bump_version(current: str, kind: BumpKind | str) -> str:
    """Return ``current`` bumped by ``kind`` with lower components reset."""

    return str(VersionRecord.parse(current).bump(kind))


def is_downgrade(current: VersionRecord, target: VersionRecord) -> bool:
    return target.as_packaging_version() < current.as_packaging_version()


__all__ = [
    "BumpKind",
    "STAGE",
    "VersionRecord",
    "bump_version",
    "is_downgrade",
    "is_valid_version",
]
