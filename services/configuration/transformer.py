"""Apply a build variant to the configuration store."""

from __future__ import annotations

import logging
from typing import Any, MutableMapping

from domain.build.variants import LOCAL_DEV_SERVER_URL, BuildVariant, variant_profile
from services.configuration.document import ConfigurationDocument
from services.configuration.store import BackupStore, ConfigurationStore, read_document

_LOGGER = logging.getLogger(__name__)


def transform_document(document: ConfigurationDocument, variant: BuildVariant) -> ConfigurationDocument:
    """Return a new document carrying ``variant``'s identity fields.

    Test builds only repoint ``build.frontendDist`` at the local dev server and
    keep the identity already present.  Fields outside the mutation set pass
    through unchanged.
    """

    data = document.mutable_copy()
    build = _ensure_section(data, "build")

    if variant is BuildVariant.TEST:
        build["frontendDist"] = LOCAL_DEV_SERVER_URL
        return ConfigurationDocument(data=data)

    profile = variant_profile(variant)
    data["productName"] = profile.product_name
    data["identifier"] = profile.identifier
    build["devUrl"] = profile.dev_url
    build["frontendDist"] = profile.dist_url
    _ensure_section(data, "bundle")["icon"] = list(profile.icon_paths)

    plugins = _ensure_section(data, "plugins")
    desktop = _ensure_section(_ensure_section(plugins, "deep-link"), "desktop")
    desktop["schemes"] = list(profile.deep_link_schemes)
    _ensure_section(plugins, "updater")["endpoints"] = [profile.update_endpoint]
    return ConfigurationDocument(data=data)


def _ensure_section(data: MutableMapping[str, Any], key: str) -> MutableMapping[str, Any]:
    section = data.get(key)
    if not isinstance(section, dict):
        section = {}
        data[key] = section
    return section


class ConfigurationTransformer:
    """Backup, mutate and persist the configuration store for one variant."""

    def __init__(self, store: ConfigurationStore, backup: BackupStore) -> None:
        self._store = store
        self._backup = backup

    @property
    def store(self) -> ConfigurationStore:
        return self._store

    @property
    def backup(self) -> BackupStore:
        return self._backup

    def apply(self, variant: BuildVariant) -> ConfigurationDocument:
        """Transform the store for ``variant`` and return the written document."""

        _LOGGER.info("Configuring %s build using %s", variant.value, self._store.path)
        current = self._store.load()
        self._backup.ensure_baseline(current)
        transformed = transform_document(current, variant)
        self._store.save(transformed)
        _LOGGER.info(
            "Configuration updated for %s build (identifier=%s, frontendDist=%s)",
            variant.value,
            transformed.identifier,
            transformed.dist_url,
        )
        return transformed

    def restore_baseline(self) -> ConfigurationDocument:
        """Copy the backup verbatim over the store.

        This is an explicit operator action; nothing in the tooling calls it
        automatically after a failed build.
        """

        text = self._backup.read_text()
        document = read_document(self._backup.path)
        self._store.write_verbatim(text)
        _LOGGER.info("Restored %s from baseline %s", self._store.path, self._backup.path)
        return document


__all__ = ["ConfigurationTransformer", "transform_document"]
