"""Immutable view of the Tauri configuration document."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from typing import Any, Mapping, Tuple


@dataclass(frozen=True)
class ConfigurationDocument:
    """Parsed configuration store contents plus the text they were read from.

    ``source_text`` is kept so the backup can be a byte-identical copy of the
    file as it was found.  Documents produced by a transform carry no source
    text and are serialised with :meth:`to_json`.
    """

    data: Mapping[str, Any]
    source_text: str | None = field(default=None, compare=False, repr=False)

    @classmethod
    def from_text(cls, text: str) -> "ConfigurationDocument":
        """Parse ``text``; raises :class:`ValueError` unless it is a JSON object."""

        parsed = json.loads(text)
        if not isinstance(parsed, dict):
            raise ValueError(f"expected a JSON object, found {type(parsed).__name__}")
        return cls(data=parsed, source_text=text)

    def to_json(self) -> str:
        return json.dumps(self.data, indent=2, ensure_ascii=False) + "\n"

    def verbatim_text(self) -> str:
        """Return the original file text when known, else the serialised form."""

        if self.source_text is not None:
            return self.source_text
        return self.to_json()

    def mutable_copy(self) -> dict[str, Any]:
        return copy.deepcopy(dict(self.data))

    @property
    def product_name(self) -> str | None:
        return self.data.get("productName")

    @property
    def identifier(self) -> str | None:
        return self.data.get("identifier")

    @property
    def version(self) -> str | None:
        return self.data.get("version")

    @property
    def dev_url(self) -> str | None:
        return _section(self.data, "build").get("devUrl")

    @property
    def dist_url(self) -> str | None:
        return _section(self.data, "build").get("frontendDist")

    @property
    def icon_paths(self) -> Tuple[str, ...]:
        return tuple(_section(self.data, "bundle").get("icon") or ())

    @property
    def deep_link_schemes(self) -> Tuple[str, ...]:
        desktop = _section(_section(_section(self.data, "plugins"), "deep-link"), "desktop")
        return tuple(desktop.get("schemes") or ())

    @property
    def update_endpoints(self) -> Tuple[str, ...]:
        updater = _section(_section(self.data, "plugins"), "updater")
        return tuple(updater.get("endpoints") or ())


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    if isinstance(value, Mapping):
        return value
    return {}


__all__ = ["ConfigurationDocument"]
