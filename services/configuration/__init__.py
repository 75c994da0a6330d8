"""Public API for the configuration store and variant transformer."""

from __future__ import annotations

from pathlib import Path

from app.config import BuildToolConfig, get_build_config
from services.configuration.document import ConfigurationDocument
from services.configuration.store import BackupStore, ConfigurationStore, read_document
from services.configuration.transformer import ConfigurationTransformer, transform_document


def build_transformer(root: Path, config: BuildToolConfig | None = None) -> ConfigurationTransformer:
    """Construct a transformer for the checkout at ``root``."""

    config = config or get_build_config()
    store = ConfigurationStore(config.paths.resolve(root, "config_store"))
    backup = BackupStore(config.paths.resolve(root, "config_backup"))
    return ConfigurationTransformer(store, backup)


__all__ = [
    "BackupStore",
    "ConfigurationDocument",
    "ConfigurationStore",
    "ConfigurationTransformer",
    "build_transformer",
    "read_document",
    "transform_document",
]
