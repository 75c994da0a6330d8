"""File-backed configuration store and its write-once baseline backup."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from domain.build.errors import ConfigReadError, ConfigWriteError
from services.configuration.document import ConfigurationDocument
from shared.atomic_write import write_text_atomic

_LOGGER = logging.getLogger(__name__)

STAGE = "config-transform"


def read_document(path: Path, *, stage: str = STAGE) -> ConfigurationDocument:
    """Load the configuration document stored at ``path``."""

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigReadError("Configuration file not found", stage=stage, path=path) from exc
    except OSError as exc:
        raise ConfigReadError(f"Unable to read configuration: {exc}", stage=stage, path=path) from exc

    try:
        return ConfigurationDocument.from_text(text)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigReadError(f"Configuration is not valid JSON: {exc}", stage=stage, path=path) from exc


class ConfigurationStore:
    """The document the native build reads for identity and endpoint fields."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> ConfigurationDocument:
        return read_document(self.path)

    def save(self, document: ConfigurationDocument) -> None:
        """Replace the stored document with ``document`` in a single write."""

        self._write(document.to_json())

    def write_verbatim(self, text: str) -> None:
        self._write(text)

    def _write(self, text: str) -> None:
        try:
            write_text_atomic(self.path, text)
        except OSError as exc:
            raise ConfigWriteError(
                f"Unable to write configuration: {exc}", stage=STAGE, path=self.path
            ) from exc
        _LOGGER.debug("Wrote configuration store %s", self.path)


class BackupStore:
    """Write-once snapshot of the untransformed configuration document.

    :meth:`ensure_baseline` is first-call-wins: the only guard is whether the
    backup file already exists, so a later call never replaces the baseline
    captured after a clean checkout.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def ensure_baseline(self, document: ConfigurationDocument) -> bool:
        """Persist ``document`` verbatim unless a baseline already exists.

        Returns ``True`` when this call created the backup.
        """

        if self.path.exists():
            _LOGGER.debug("Keeping existing configuration backup %s", self.path)
            return False
        try:
            write_text_atomic(self.path, document.verbatim_text())
        except OSError as exc:
            raise ConfigWriteError(
                f"Unable to write configuration backup: {exc}", stage=STAGE, path=self.path
            ) from exc
        _LOGGER.info("Saved baseline configuration to %s", self.path)
        return True

    def read_text(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise ConfigReadError(
                "No configuration backup to restore from", stage=STAGE, path=self.path
            ) from exc
        except OSError as exc:
            raise ConfigReadError(
                f"Unable to read configuration backup: {exc}", stage=STAGE, path=self.path
            ) from exc

    def load(self) -> ConfigurationDocument:
        return read_document(self.path)


__all__ = ["BackupStore", "ConfigurationStore", "STAGE", "read_document"]
