"""Domain model for build variants and the errors raised by the build tooling."""

from domain.build.errors import (
    BuildPipelineError,
    ConfigReadError,
    ConfigWriteError,
    ExternalToolFailure,
    InvalidVersionFormat,
    MissingCredentials,
    VersionMismatchError,
)
from domain.build.variants import (
    DEV_FLAG,
    LEGACY_DEV_FLAG,
    LEGACY_TEST_FLAG,
    LOCAL_DEV_SERVER_URL,
    TEST_FLAG,
    VARIANT_PROFILES,
    BuildVariant,
    VariantProfile,
    resolve_variant,
    variant_profile,
)

__all__ = [
    "BuildPipelineError",
    "BuildVariant",
    "ConfigReadError",
    "ConfigWriteError",
    "DEV_FLAG",
    "ExternalToolFailure",
    "InvalidVersionFormat",
    "LEGACY_DEV_FLAG",
    "LEGACY_TEST_FLAG",
    "LOCAL_DEV_SERVER_URL",
    "MissingCredentials",
    "TEST_FLAG",
    "VARIANT_PROFILES",
    "VariantProfile",
    "VersionMismatchError",
    "resolve_variant",
    "variant_profile",
]
