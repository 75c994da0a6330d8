"""Build tooling configuration loaded from JSON resources."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from importlib import resources
from math import isfinite
from pathlib import Path
from typing import Any, Mapping

_CONFIG_RESOURCE = "build.json"
CONFIG_PATH_ENV = "CUSHION_BUILD_CONFIG"
_BUILD_CONFIG_CACHE: BuildToolConfig | None = None

_DEFAULT_PATHS = {
    "config_store": "src-tauri/tauri.conf.json",
    "config_backup": "src-tauri/tauri.conf.json.backup",
    "package_manifest": "package.json",
    "crate_manifest": "src-tauri/Cargo.toml",
    "release_bundle_dir": "src-tauri/target/release/bundle",
    "debug_bundle_dir": "src-tauri/target/debug/bundle",
    "update_feed_dir": "dist/updates",
}
_DEFAULT_RELEASE_BASE_URL = "https://github.com/cushioncomputing/cushion-desktop/releases/download"
_DEFAULT_TOOL_TIMEOUT = 1800.0
_DEFAULT_ARCH = "aarch64"
_DEFAULT_PLATFORM_KEY = "darwin-aarch64"


@dataclass(frozen=True)
class ProjectPaths:
    """Checkout-relative locations of the files the tooling reads and writes."""

    config_store: str
    config_backup: str
    package_manifest: str
    crate_manifest: str
    release_bundle_dir: str
    debug_bundle_dir: str
    update_feed_dir: str

    def resolve(self, root: Path, name: str) -> Path:
        return Path(root) / getattr(self, name)

    def version_manifests(self, root: Path) -> tuple[Path, ...]:
        """Version-bearing manifests in canonical order (package manifest first)."""

        root = Path(root)
        return (
            root / self.package_manifest,
            root / self.crate_manifest,
            root / self.config_store,
        )


@dataclass(frozen=True)
class ReleaseSettings:
    """Settings for packaging and update-feed emission."""

    release_base_url: str
    tool_timeout_seconds: float
    default_arch: str
    platform_key: str


@dataclass(frozen=True)
class BuildToolConfig:
    """Structured configuration values for the build tooling."""

    paths: ProjectPaths
    release: ReleaseSettings


def get_build_config() -> BuildToolConfig:
    """Return the cached build tooling configuration."""

    global _BUILD_CONFIG_CACHE
    if _BUILD_CONFIG_CACHE is None:
        _BUILD_CONFIG_CACHE = load_build_config()
    return _BUILD_CONFIG_CACHE


def reset_build_config_cache() -> None:
    """Reset the cached configuration for subsequent reloads."""

    global _BUILD_CONFIG_CACHE
    _BUILD_CONFIG_CACHE = None


def load_build_config(path: str | Path | None = None) -> BuildToolConfig:
    """Load configuration from ``path``, ``$CUSHION_BUILD_CONFIG`` or the bundled resource."""

    data = _read_config_data(path)
    paths = _parse_paths_section(data.get("paths"))
    release = _parse_release_section(data.get("release"))
    return BuildToolConfig(paths=paths, release=release)


def _read_config_data(path: str | Path | None) -> Mapping[str, Any]:
    if path is None:
        env_path = os.environ.get(CONFIG_PATH_ENV)
        if env_path:
            path = env_path
    if path is not None:
        return _load_json_from_path(Path(path).expanduser())
    return _load_default_config_data()


def _load_json_from_path(path: Path) -> Mapping[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    return _parse_json(raw)


def _load_default_config_data() -> Mapping[str, Any]:
    try:
        resource = resources.files(__package__).joinpath(_CONFIG_RESOURCE)
        raw = resource.read_text(encoding="utf-8")
    except (FileNotFoundError, OSError):
        return {}
    return _parse_json(raw)


def _parse_json(raw: str) -> Mapping[str, Any]:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    if isinstance(parsed, Mapping):
        return parsed
    return {}


def _parse_paths_section(section: Any) -> ProjectPaths:
    values = dict(_DEFAULT_PATHS)
    if isinstance(section, Mapping):
        for key in values:
            candidate = section.get(key)
            if isinstance(candidate, str) and candidate.strip():
                values[key] = candidate.strip()
    return ProjectPaths(**values)


def _parse_release_section(section: Any) -> ReleaseSettings:
    if not isinstance(section, Mapping):
        section = {}
    base_url = _coerce_text(section.get("release_base_url"), default=_DEFAULT_RELEASE_BASE_URL)
    return ReleaseSettings(
        release_base_url=base_url.rstrip("/"),
        tool_timeout_seconds=_coerce_positive_float(
            section.get("tool_timeout_seconds"), default=_DEFAULT_TOOL_TIMEOUT
        ),
        default_arch=_coerce_text(section.get("default_arch"), default=_DEFAULT_ARCH),
        platform_key=_coerce_text(section.get("platform_key"), default=_DEFAULT_PLATFORM_KEY),
    )


def _coerce_text(value: Any, *, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _coerce_positive_float(value: Any, *, default: float) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        candidate = float(value)
    elif isinstance(value, str):
        try:
            candidate = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    if not isfinite(candidate) or candidate <= 0:
        return default
    return candidate


__all__ = [
    "BuildToolConfig",
    "CONFIG_PATH_ENV",
    "ProjectPaths",
    "ReleaseSettings",
    "get_build_config",
    "load_build_config",
    "reset_build_config_cache",
]
