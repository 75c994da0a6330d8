"""Build and publish per-variant update feed manifests."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Mapping
from urllib.parse import quote

from packaging.version import InvalidVersion, Version

from domain.build.errors import ConfigWriteError
from domain.build.variants import BuildVariant, variant_profile
from services.release.constants import STAGE_MANIFEST
from services.release.hashing import calculate_sha256, read_signature
from services.release.models import InstallerArtifact, PlatformAsset, UpdateManifest
from shared.atomic_write import write_text_atomic

_LOGGER = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def feed_file_name(variant: BuildVariant) -> str | None:
    """``latest.json`` / ``latest-dev.json``; Test builds publish no feed."""

    if variant is BuildVariant.TEST:
        return None
    return variant_profile(variant).update_manifest_name


def download_url(release_base_url: str, version: str, asset_name: str) -> str:
    return f"{release_base_url.rstrip('/')}/v{version}/{quote(asset_name)}"


def build_update_manifest(
    installer: InstallerArtifact,
    *,
    release_base_url: str,
    platform_key: str,
    notes: str = "",
    clock: Callable[[], datetime] = utc_now,
) -> UpdateManifest:
    """Describe ``installer`` as the newest release for its platform."""

    signature = read_signature(installer.path)
    if signature is None:
        _LOGGER.warning("No updater signature found for %s; publishing unsigned entry", installer.path)
        signature = ""
    asset = PlatformAsset(
        url=download_url(release_base_url, installer.version, installer.asset_name),
        signature=signature,
        sha256=calculate_sha256(installer.path),
    )
    published = clock().astimezone(timezone.utc).replace(microsecond=0)
    return UpdateManifest(
        version=installer.version,
        notes=notes,
        pub_date=published.isoformat().replace("+00:00", "Z"),
        platforms={platform_key: asset},
    )


def write_update_manifest(manifest: UpdateManifest, destination: Path) -> bool:
    """Write ``manifest`` to ``destination``; return ``False`` if it is already published.

    A published feed is never edited in place: an existing file for the same
    version with different contents, or for a newer version, is refused.
    """

    content = manifest.to_dict()
    existing = _read_existing(destination)
    if existing is not None:
        if _same_release(existing, content):
            _LOGGER.info("Update feed %s already published for %s", destination, manifest.version)
            return False
        version = existing.get("version")
        _guard_against_rewrite(destination, version if isinstance(version, str) else None, manifest.version)

    payload = json.dumps(content, indent=2) + "\n"
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        write_text_atomic(destination, payload)
    except OSError as exc:
        raise ConfigWriteError(
            f"Unable to write update feed: {exc}", stage=STAGE_MANIFEST, path=destination
        ) from exc
    _LOGGER.info("Wrote update feed %s for version %s", destination, manifest.version)
    return True


def _read_existing(destination: Path) -> dict[str, Any] | None:
    try:
        text = destination.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise ConfigWriteError(
            f"Unable to inspect existing update feed: {exc}", stage=STAGE_MANIFEST, path=destination
        ) from exc
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        return {}
    return parsed if isinstance(parsed, dict) else {}


def _same_release(existing: Mapping[str, Any], candidate: Mapping[str, Any]) -> bool:
    """Publication time aside, does ``existing`` describe the same release?"""

    def strip(document: Mapping[str, Any]) -> dict[str, Any]:
        return {key: value for key, value in document.items() if key != "pub_date"}

    return strip(existing) == strip(candidate)


def _guard_against_rewrite(destination: Path, existing: str | None, candidate: str) -> None:
    if existing is None:
        _LOGGER.warning("Replacing unreadable update feed %s", destination)
        return
    try:
        existing_version = Version(existing)
    except InvalidVersion:
        _LOGGER.warning("Replacing update feed %s with invalid version %r", destination, existing)
        return
    candidate_version = Version(candidate)
    if existing_version == candidate_version:
        raise ConfigWriteError(
            f"Update feed for {candidate} is already published with different contents",
            stage=STAGE_MANIFEST,
            path=destination,
            field="version",
        )
    if existing_version > candidate_version:
        raise ConfigWriteError(
            f"Update feed already advertises newer version {existing}",
            stage=STAGE_MANIFEST,
            path=destination,
            field="version",
        )


__all__ = [
    "build_update_manifest",
    "download_url",
    "utc_now",
    "feed_file_name",
    "write_update_manifest",
]
