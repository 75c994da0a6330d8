from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Callable, Mapping, Sequence

from app.config import BuildToolConfig, get_build_config
from services.configuration import build_transformer
from services.release import TauriReleaseSteps
from services.release.feed import utc_now
from tests.helpers import Checkout


class RecordingRunner:
    """Records commands and fakes the files the real tools would produce."""

    def __init__(self, on_run: Callable[[str, tuple[str, ...]], None] | None = None) -> None:
        self.calls: list[tuple[str, tuple[str, ...], Path | None]] = []
        self._on_run = on_run

    def run(
        self,
        stage: str,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        args = tuple(str(part) for part in command)
        self.calls.append((stage, args, cwd))
        if self._on_run is not None:
            self._on_run(stage, args)

    @property
    def commands(self) -> list[tuple[str, ...]]:
        return [args for _, args, _ in self.calls]


def fake_tauri_outputs(root: Path, config: BuildToolConfig | None = None, *, signature: str | None = "c2lnbmF0dXJl"):
    """Return an ``on_run`` hook creating the app bundle and DMG on disk."""

    config = config or get_build_config()

    def on_run(stage: str, args: tuple[str, ...]) -> None:
        if args[:3] == ("npx", "tauri", "build"):
            name = "debug_bundle_dir" if "--debug" in args else "release_bundle_dir"
            product = _product_name(root, config)
            bundle = config.paths.resolve(root, name) / "macos" / f"{product}.app"
            bundle.mkdir(parents=True, exist_ok=True)
            (bundle / "Info.plist").write_text("<plist/>", encoding="utf-8")
        elif args[:2] == ("hdiutil", "create"):
            dmg = Path(args[-1])
            dmg.write_bytes(b"dmg payload")
            if signature is not None:
                dmg.with_name(dmg.name + ".sig").write_text(signature + "\n", encoding="utf-8")

    return on_run


def _product_name(root: Path, config: BuildToolConfig) -> str:
    data = json.loads(config.paths.resolve(root, "config_store").read_text(encoding="utf-8"))
    return data["productName"]


def make_steps(
    checkout: Checkout,
    runner: RecordingRunner,
    *,
    env: Mapping[str, str] | None = None,
    output_dir: Path | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> TauriReleaseSteps:
    config = get_build_config()
    return TauriReleaseSteps(
        checkout.root,
        config=config,
        runner=runner,
        transformer=build_transformer(checkout.root, config),
        env=env if env is not None else {},
        notes="Bug fixes",
        output_dir=output_dir,
        clock=clock,
    )


__all__ = ["RecordingRunner", "fake_tauri_outputs", "make_steps"]
