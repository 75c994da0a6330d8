"""Keep one release version mirrored across every registered manifest."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from domain.build.errors import ConfigWriteError, InvalidVersionFormat, VersionMismatchError
from services.versioning.manifests import VersionManifest, manifest_for
from services.versioning.semver import STAGE, BumpKind, VersionRecord, is_downgrade
from shared.atomic_write import write_text_atomic

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class VersionReport:
    """Version currently recorded in one manifest."""

    path: Path
    label: str
    version: str | None


@dataclass(frozen=True)
class _PendingWrite:
    manifest: VersionManifest
    original: str
    updated: str

    @property
    def changed(self) -> bool:
        return self.original != self.updated


class VersionSynchronizer:
    """Read, bump and write the version shared by a set of manifests.

    The first manifest is canonical: bumps are computed from its version.
    Every manifest is read and patched in memory before anything is written,
    so a missing file or malformed version aborts with no file modified.
    Should a write fail midway, the files already written are put back from
    their in-memory originals.
    """

    def __init__(self, manifests: Iterable[VersionManifest | Path]) -> None:
        resolved: list[VersionManifest] = []
        for entry in manifests:
            resolved.append(entry if isinstance(entry, VersionManifest) else manifest_for(Path(entry)))
        if not resolved:
            raise ValueError("At least one manifest is required")
        self._manifests = tuple(resolved)

    @property
    def manifests(self) -> tuple[VersionManifest, ...]:
        return self._manifests

    @property
    def canonical(self) -> VersionManifest:
        return self._manifests[0]

    def current_versions(self) -> list[VersionReport]:
        """Report each manifest's version without writing anything."""

        return [
            VersionReport(path=manifest.path, label=manifest.label, version=manifest.read_version())
            for manifest in self._manifests
        ]

    def current_version(self) -> VersionRecord:
        manifest = self.canonical
        return VersionRecord.parse(manifest.read_version(), path=manifest.path)

    def check(self) -> VersionRecord:
        """Return the shared version, or raise when the manifests disagree."""

        reports = self.current_versions()
        values = {report.version for report in reports}
        if len(values) != 1:
            raise VersionMismatchError([(report.path, report.version) for report in reports], stage=STAGE)
        return VersionRecord.parse(reports[0].version, path=reports[0].path)

    def resolve_target(self, target: BumpKind | VersionRecord | str) -> VersionRecord:
        """Turn a bump keyword or explicit version into a concrete record."""

        if isinstance(target, VersionRecord):
            return target
        if isinstance(target, BumpKind) or target in {kind.value for kind in BumpKind}:
            return self.current_version().bump(target)
        return VersionRecord.parse(target, field="target version")

    def sync(self, target: BumpKind | VersionRecord | str) -> VersionRecord:
        """Write the resolved ``target`` version into every manifest."""

        resolved = self.resolve_target(target)
        current_text = self.canonical.read_version()
        try:
            current = VersionRecord.parse(current_text, path=self.canonical.path)
        except InvalidVersionFormat:
            # An explicit target may be used to repair a corrupt canonical version.
            _LOGGER.warning("Canonical manifest %s has invalid version %r", self.canonical.path, current_text)
        else:
            if is_downgrade(current, resolved):
                _LOGGER.warning("Downgrading version %s -> %s", current, resolved)

        pending = self._prepare(str(resolved))
        _LOGGER.info("Updating version: %s -> %s", current_text, resolved)
        self._commit(pending)
        for write in pending:
            state = "updated" if write.changed else "unchanged"
            _LOGGER.info("  %s: %s (%s)", write.manifest.label, resolved, state)
        return resolved

    def _prepare(self, version: str) -> list[_PendingWrite]:
        pending: list[_PendingWrite] = []
        for manifest in self._manifests:
            original = manifest.read_text()
            updated = manifest.replace_version(original, version)
            pending.append(_PendingWrite(manifest=manifest, original=original, updated=updated))
        return pending

    def _commit(self, pending: Sequence[_PendingWrite]) -> None:
        written: list[_PendingWrite] = []
        for write in pending:
            if not write.changed:
                continue
            try:
                write_text_atomic(write.manifest.path, write.updated)
            except OSError as exc:
                inconsistent = self._rollback(written)
                message = f"Unable to write manifest: {exc}"
                if inconsistent:
                    message += "; manual fix needed for " + ", ".join(str(path) for path in inconsistent)
                raise ConfigWriteError(
                    message,
                    stage=STAGE,
                    path=write.manifest.path,
                    field="version",
                    inconsistent_paths=inconsistent,
                ) from exc
            written.append(write)

    def _rollback(self, written: Sequence[_PendingWrite]) -> list[Path]:
        inconsistent: list[Path] = []
        for write in reversed(written):
            try:
                write_text_atomic(write.manifest.path, write.original)
            except OSError:
                _LOGGER.exception("Failed to restore %s after aborted version sync", write.manifest.path)
                inconsistent.append(write.manifest.path)
            else:
                _LOGGER.warning("Restored %s after aborted version sync", write.manifest.path)
        return inconsistent


__all__ = ["VersionReport", "VersionSynchronizer"]
