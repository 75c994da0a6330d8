"""Checksum and signature helpers for release artifacts."""

from __future__ import annotations

import hashlib
from pathlib import Path

from domain.build.errors import ConfigReadError
from services.release.constants import SIGNATURE_SUFFIX, STAGE_MANIFEST


def calculate_sha256(path: Path) -> str:
    digest = hashlib.sha256()
    try:
        with path.open("rb") as source:
            for chunk in iter(lambda: source.read(65536), b""):
                digest.update(chunk)
    except OSError as exc:
        raise ConfigReadError(f"Unable to hash artifact: {exc}", stage=STAGE_MANIFEST, path=path) from exc
    return digest.hexdigest()


def signature_path(artifact: Path) -> Path:
    return artifact.with_name(artifact.name + SIGNATURE_SUFFIX)


def read_signature(artifact: Path) -> str | None:
    """Return the updater signature stored beside ``artifact``, if one was produced."""

    path = signature_path(artifact)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise ConfigReadError(f"Unable to read signature: {exc}", stage=STAGE_MANIFEST, path=path) from exc
    return text.strip() or None


__all__ = ["calculate_sha256", "read_signature", "signature_path"]
