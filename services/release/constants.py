"""Constants shared across the release pipeline modules."""

from __future__ import annotations

STAGE_RESOLVE = "variant-resolve"
STAGE_CONFIGURE = "config-transform"
STAGE_NATIVE_BUILD = "native-build"
STAGE_PACKAGE = "package"
STAGE_SIGN = "sign"
STAGE_MANIFEST = "update-manifest"

APPLE_ID_ENV = "APPLE_ID"
APPLE_PASSWORD_ENV = "APPLE_PASSWORD"
APPLE_TEAM_ID_ENV = "APPLE_TEAM_ID"
NOTARIZATION_ENV_VARS = (APPLE_ID_ENV, APPLE_PASSWORD_ENV, APPLE_TEAM_ID_ENV)

SIGNATURE_SUFFIX = ".sig"
DMG_FORMAT = "UDZO"
