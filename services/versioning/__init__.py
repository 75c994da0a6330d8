"""Public API for the version synchronisation service."""

from __future__ import annotations

from pathlib import Path

from app.config import BuildToolConfig, get_build_config
from services.versioning.manifests import (
    JsonVersionManifest,
    TomlVersionManifest,
    VersionManifest,
    manifest_for,
)
from services.versioning.semver import BumpKind, VersionRecord, bump_version, is_valid_version
from services.versioning.synchronizer import VersionReport, VersionSynchronizer


def default_manifests(root: Path, config: BuildToolConfig | None = None) -> list[VersionManifest]:
    """Package manifest, crate manifest and app configuration, canonical first."""

    config = config or get_build_config()
    return [manifest_for(path) for path in config.paths.version_manifests(root)]


def build_synchronizer(root: Path, config: BuildToolConfig | None = None) -> VersionSynchronizer:
    return VersionSynchronizer(default_manifests(root, config))


__all__ = [
    "BumpKind",
    "JsonVersionManifest",
    "TomlVersionManifest",
    "VersionManifest",
    "VersionRecord",
    "VersionReport",
    "VersionSynchronizer",
    "build_synchronizer",
    "bump_version",
    "default_manifests",
    "is_valid_version",
    "manifest_for",
]
