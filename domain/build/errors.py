"""Error taxonomy shared by the configuration, versioning and release tooling.

Every error names the stage that raised it and, where one is involved, the
file (and field) that caused it, so an operator can fix the checkout without
reading the tooling's internals.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class BuildPipelineError(RuntimeError):
    """Base class for fatal build tooling failures."""

    def __init__(
        self,
        message: str,
        *,
        stage: str,
        path: Path | str | None = None,
        field: str | None = None,
    ) -> None:
        self.stage = stage
        self.path = Path(path) if path is not None else None
        self.field = field
        self.detail = message
        super().__init__(self._format(message))

    def _format(self, message: str) -> str:
        location = ""
        if self.path is not None and self.field is not None:
            location = f" ({self.path}: {self.field})"
        elif self.path is not None:
            location = f" ({self.path})"
        elif self.field is not None:
            location = f" ({self.field})"
        return f"[{self.stage}] {message}{location}"


class ConfigReadError(BuildPipelineError):
    """Raised when a configuration document or manifest is missing or corrupt."""


class ConfigWriteError(BuildPipelineError):
    """Raised when a configuration document or manifest cannot be written."""

    def __init__(
        self,
        message: str,
        *,
        stage: str,
        path: Path | str | None = None,
        field: str | None = None,
        inconsistent_paths: Sequence[Path] = (),
    ) -> None:
        self.inconsistent_paths = tuple(inconsistent_paths)
        super().__init__(message, stage=stage, path=path, field=field)


class InvalidVersionFormat(BuildPipelineError):
    """Raised when a version string is not ``MAJOR.MINOR.PATCH``."""


class VersionMismatchError(BuildPipelineError):
    """Raised when version-bearing manifests disagree at rest."""

    def __init__(self, versions: Sequence[tuple[Path, str | None]], *, stage: str) -> None:
        self.versions = tuple(versions)
        listing = ", ".join(f"{path}={value}" for path, value in self.versions)
        super().__init__(f"Manifest versions are out of sync: {listing}", stage=stage)


class ExternalToolFailure(BuildPipelineError):
    """Raised when an external build, packaging or signing tool fails."""

    def __init__(
        self,
        message: str,
        *,
        stage: str,
        command: Sequence[str] = (),
        returncode: int | None = None,
        path: Path | str | None = None,
    ) -> None:
        self.command = tuple(str(part) for part in command)
        self.returncode = returncode
        super().__init__(message, stage=stage, path=path)


class MissingCredentials(BuildPipelineError):
    """Raised when signing or notarization secrets are absent.

    The release pipeline treats this as a degraded path and carries on with an
    unsigned artifact.
    """

    def __init__(self, missing: Sequence[str], *, stage: str) -> None:
        self.missing = tuple(missing)
        super().__init__(
            "Missing credentials: " + ", ".join(self.missing),
            stage=stage,
        )


__all__ = [
    "BuildPipelineError",
    "ConfigReadError",
    "ConfigWriteError",
    "ExternalToolFailure",
    "InvalidVersionFormat",
    "MissingCredentials",
    "VersionMismatchError",
]
