"""Version-bearing manifest formats.

Each manifest patches only the characters of its version value in the raw
file text.  Nothing is parsed and re-serialised, so indentation, key order,
comments and trailing newlines in the rest of the file survive untouched.
"""

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from pathlib import Path

from domain.build.errors import ConfigReadError
from services.versioning.semver import STAGE

_TOML_VERSION_PATTERN = re.compile(r'^version\s*=\s*"([^"]+)"', re.MULTILINE)


class VersionManifest(ABC):
    """A file that carries a copy of the release version."""

    format_name = "text"

    def __init__(self, path: Path, label: str | None = None) -> None:
        self.path = Path(path)
        self.label = label or self.path.name

    def read_text(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise ConfigReadError("Manifest not found", stage=STAGE, path=self.path) from exc
        except OSError as exc:
            raise ConfigReadError(f"Unable to read manifest: {exc}", stage=STAGE, path=self.path) from exc

    def read_version(self) -> str | None:
        return self.extract_version(self.read_text())

    @abstractmethod
    def extract_version(self, text: str) -> str | None:
        """Return the raw version string in ``text`` or ``None`` when absent."""

    @abstractmethod
    def replace_version(self, text: str, version: str) -> str:
        """Return ``text`` with only the version value changed to ``version``."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.path)!r})"


class JsonVersionManifest(VersionManifest):
    """``package.json`` / ``tauri.conf.json``: the top-level ``version`` field."""

    format_name = "json"

    def extract_version(self, text: str) -> str | None:
        parsed = self._parse(text)
        value = parsed.get("version")
        return value if isinstance(value, str) else None

    def replace_version(self, text: str, version: str) -> str:
        self._parse(text)
        span = _locate_top_level_string(text, "version")
        if span is None:
            raise ConfigReadError(
                "Manifest has no top-level string version field",
                stage=STAGE,
                path=self.path,
                field="version",
            )
        start, end = span
        encoded = json.dumps(version)[1:-1]
        return text[:start] + encoded + text[end:]

    def _parse(self, text: str) -> dict:
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigReadError(f"Manifest is not valid JSON: {exc}", stage=STAGE, path=self.path) from exc
        if not isinstance(parsed, dict):
            raise ConfigReadError("Manifest is not a JSON object", stage=STAGE, path=self.path)
        return parsed


class TomlVersionManifest(VersionManifest):
    """``Cargo.toml``: the first line-anchored ``version = "..."`` entry."""

    format_name = "toml"

    def extract_version(self, text: str) -> str | None:
        match = _TOML_VERSION_PATTERN.search(text)
        return match.group(1) if match else None

    def replace_version(self, text: str, version: str) -> str:
        match = _TOML_VERSION_PATTERN.search(text)
        if match is None:
            raise ConfigReadError(
                "Manifest has no version line",
                stage=STAGE,
                path=self.path,
                field="version",
            )
        return text[: match.start(1)] + version + text[match.end(1) :]


def manifest_for(path: Path, label: str | None = None) -> VersionManifest:
    """Pick the manifest format from ``path``'s suffix."""

    suffix = Path(path).suffix.lower()
    if suffix == ".json":
        return JsonVersionManifest(path, label)
    if suffix == ".toml":
        return TomlVersionManifest(path, label)
    raise ConfigReadError(f"Unsupported manifest format {suffix!r}", stage=STAGE, path=path)


def _locate_top_level_string(text: str, key: str) -> tuple[int, int] | None:
    """Return the span of the string value stored under a top-level ``key``.

    The span excludes the surrounding quotes.  A repeated key resolves to its
    last occurrence, matching :func:`json.loads`.  ``text`` must already be
    known to hold a JSON object.
    """

    span: tuple[int, int] | None = None
    depth = 0
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if char == '"':
            end = _string_end(text, index)
            if depth == 1:
                colon = _skip_whitespace(text, end)
                if colon < length and text[colon] == ":" and json.loads(text[index:end]) == key:
                    value_start = _skip_whitespace(text, colon + 1)
                    if value_start < length and text[value_start] == '"':
                        span = (value_start + 1, _string_end(text, value_start) - 1)
                    else:
                        span = None
            index = end
            continue
        if char in "{[":
            depth += 1
        elif char in "}]":
            depth -= 1
        index += 1
    return span


def _string_end(text: str, start: int) -> int:
    index = start + 1
    while index < len(text):
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char == '"':
            return index + 1
        index += 1
    return len(text)


def _skip_whitespace(text: str, index: int) -> int:
    while index < len(text) and text[index] in " \t\r\n":
        index += 1
    return index


__all__ = [
    "JsonVersionManifest",
    "TomlVersionManifest",
    "VersionManifest",
    "manifest_for",
]
