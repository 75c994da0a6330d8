"""Build variants and the fixed identity table each variant maps to."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Tuple

TEST_FLAG = "TEST_MODE"
DEV_FLAG = "DEV_MODE"
LEGACY_TEST_FLAG = "TAURI_BUILD_TEST"
LEGACY_DEV_FLAG = "TAURI_BUILD_DEV"

LOCAL_DEV_SERVER_URL = "http://localhost:3000"
PRODUCTION_APP_URL = "https://app.cushion.so"
UPDATE_FEED_BASE_URL = "https://github.com/cushioncomputing/cushion-desktop/releases/latest/download"


class BuildVariant(str, Enum):
    """Mutually exclusive build identities baked into a single build."""

    PRODUCTION = "production"
    DEVELOPMENT = "development"
    TEST = "test"


@dataclass(frozen=True)
class VariantProfile:
    """Identity fields written into the configuration store for a variant."""

    product_name: str
    identifier: str
    dev_url: str
    dist_url: str
    icon_paths: Tuple[str, ...]
    deep_link_schemes: Tuple[str, ...]
    update_endpoint: str
    update_manifest_name: str


VARIANT_PROFILES: Mapping[BuildVariant, VariantProfile] = MappingProxyType(
    {
        BuildVariant.PRODUCTION: VariantProfile(
            product_name="Cushion",
            identifier="com.cushion.desktop",
            dev_url=PRODUCTION_APP_URL,
            dist_url=PRODUCTION_APP_URL,
            icon_paths=("icons/icon.icns", "icons/icon.ico"),
            deep_link_schemes=("cushion",),
            update_endpoint=f"{UPDATE_FEED_BASE_URL}/latest.json",
            update_manifest_name="latest.json",
        ),
        BuildVariant.DEVELOPMENT: VariantProfile(
            product_name="Cushion Developer",
            identifier="com.cushion.desktop.dev",
            dev_url=LOCAL_DEV_SERVER_URL,
            dist_url=LOCAL_DEV_SERVER_URL,
            icon_paths=("icons/dev-icon.icns", "icons/dev-icon.ico"),
            deep_link_schemes=("cushion-dev",),
            update_endpoint=f"{UPDATE_FEED_BASE_URL}/latest-dev.json",
            update_manifest_name="latest-dev.json",
        ),
    }
)


def variant_profile(variant: BuildVariant) -> VariantProfile:
    """Return the identity table row for ``variant``.

    Test builds keep whatever identity the store already carries, so they have
    no row and raise :class:`KeyError`.
    """

    return VARIANT_PROFILES[variant]


def resolve_variant(env: Mapping[str, str | bool] | None = None) -> BuildVariant:
    """Classify the requested build from environment flags.

    Test wins over Development, which wins over the Production default.
    Anything unrecognised resolves to Production.
    """

    source = os.environ if env is None else env
    if _flag_set(source, TEST_FLAG) or _flag_set(source, LEGACY_TEST_FLAG):
        return BuildVariant.TEST
    if _flag_set(source, DEV_FLAG) or _flag_set(source, LEGACY_DEV_FLAG):
        return BuildVariant.DEVELOPMENT
    return BuildVariant.PRODUCTION


def _flag_set(env: Mapping[str, str | bool], name: str) -> bool:
    value = env.get(name)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


__all__ = [
    "BuildVariant",
    "DEV_FLAG",
    "LEGACY_DEV_FLAG",
    "LEGACY_TEST_FLAG",
    "LOCAL_DEV_SERVER_URL",
    "PRODUCTION_APP_URL",
    "TEST_FLAG",
    "UPDATE_FEED_BASE_URL",
    "VARIANT_PROFILES",
    "VariantProfile",
    "resolve_variant",
    "variant_profile",
]
