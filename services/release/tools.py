"""Run external build, packaging and signing tools."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Mapping, Protocol, Sequence

from domain.build.errors import ExternalToolFailure

_LOGGER = logging.getLogger(__name__)
_OUTPUT_TAIL_LINES = 20
_SECRET_OPTIONS = frozenset({"--password"})


class ToolRunner(Protocol):
    """Protocol describing how pipeline stages launch external commands."""

    def run(
        self,
        stage: str,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        """Run ``command`` to completion; raise :class:`ExternalToolFailure` on failure."""


class SubprocessToolRunner:
    """Launch commands with :mod:`subprocess`, waiting at most ``timeout`` seconds."""

    def __init__(self, *, timeout: float | None) -> None:
        self._timeout = timeout

    def run(
        self,
        stage: str,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        args = [str(part) for part in command]
        shown = _mask_secrets(args)
        _LOGGER.info("[%s] $ %s", stage, " ".join(shown))
        try:
            completed = subprocess.run(
                args,
                cwd=str(cwd) if cwd is not None else None,
                env=dict(env) if env is not None else None,
                capture_output=True,
                text=True,
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise ExternalToolFailure(
                f"{args[0]} timed out after {self._timeout:g}s",
                stage=stage,
                command=shown,
            ) from exc
        except OSError as exc:
            raise ExternalToolFailure(
                f"Unable to launch {args[0]}: {exc}",
                stage=stage,
                command=shown,
            ) from exc

        _log_output(stage, completed.stdout, logging.DEBUG)
        if completed.returncode != 0:
            _log_output(stage, completed.stderr, logging.ERROR)
            raise ExternalToolFailure(
                f"{args[0]} exited with status {completed.returncode}",
                stage=stage,
                command=shown,
                returncode=completed.returncode,
            )
        _log_output(stage, completed.stderr, logging.DEBUG)


def _mask_secrets(args: Sequence[str]) -> list[str]:
    masked = list(args)
    for index, part in enumerate(masked[:-1]):
        if part in _SECRET_OPTIONS:
            masked[index + 1] = "***"
    return masked


def _log_output(stage: str, output: str | None, level: int) -> None:
    if not output:
        return
    lines = output.rstrip().splitlines()[-_OUTPUT_TAIL_LINES:]
    for line in lines:
        _LOGGER.log(level, "[%s] %s", stage, line)


__all__ = ["SubprocessToolRunner", "ToolRunner"]
