"""Notarization of packaged installers."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from domain.build.errors import MissingCredentials
from services.release.constants import (
    APPLE_ID_ENV,
    APPLE_PASSWORD_ENV,
    APPLE_TEAM_ID_ENV,
    NOTARIZATION_ENV_VARS,
    STAGE_SIGN,
)
from services.release.tools import ToolRunner

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotarizationCredentials:
    apple_id: str
    password: str
    team_id: str = ""

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "NotarizationCredentials":
        """Read credentials, raising :class:`MissingCredentials` if any are blank."""

        source = os.environ if env is None else env
        missing = [name for name in NOTARIZATION_ENV_VARS if not (source.get(name) or "").strip()]
        if missing:
            raise MissingCredentials(missing, stage=STAGE_SIGN)
        return cls(
            apple_id=source[APPLE_ID_ENV].strip(),
            password=source[APPLE_PASSWORD_ENV].strip(),
            team_id=source[APPLE_TEAM_ID_ENV].strip(),
        )

    def __repr__(self) -> str:
        return f"NotarizationCredentials(apple_id={self.apple_id!r}, team_id={self.team_id!r})"


class Notarizer:
    """Submit an installer for notarization, then staple and verify the ticket."""

    def __init__(self, runner: ToolRunner) -> None:
        self._runner = runner

    def notarize(self, installer: Path, credentials: NotarizationCredentials) -> None:
        _LOGGER.info("Notarizing %s", installer)
        self._runner.run(
            STAGE_SIGN,
            (
                "xcrun",
                "notarytool",
                "submit",
                str(installer),
                "--apple-id",
                credentials.apple_id,
                "--password",
                credentials.password,
                "--team-id",
                credentials.team_id,
                "--wait",
            ),
        )
        _LOGGER.info("Stapling notarization ticket to %s", installer)
        self._runner.run(STAGE_SIGN, ("xcrun", "stapler", "staple", str(installer)))
        self._runner.run(STAGE_SIGN, ("xcrun", "stapler", "validate", str(installer)))
        _LOGGER.info("Notarization complete for %s", installer)


__all__ = ["NotarizationCredentials", "Notarizer"]
