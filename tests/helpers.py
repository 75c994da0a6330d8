from __future__ import annotations

import json
import textwrap
from dataclasses import dataclass
from pathlib import Path


def tauri_config(version: str = "1.2.3") -> dict:
    return {
        "$schema": "https://schema.tauri.app/config/2",
        "productName": "Cushion",
        "version": version,
        "identifier": "com.cushion.desktop",
        "build": {
            "beforeDevCommand": "",
            "devUrl": "https://app.cushion.so",
            "frontendDist": "https://app.cushion.so",
        },
        "app": {
            "windows": [
                {"title": "Cushion", "width": 1200, "height": 800, "titleBarStyle": "Overlay"}
            ],
            "security": {"csp": None},
        },
        "bundle": {
            "active": True,
            "targets": "all",
            "createUpdaterArtifacts": True,
            "icon": ["icons/icon.icns", "icons/icon.ico"],
        },
        "plugins": {
            "deep-link": {"desktop": {"schemes": ["cushion"]}},
            "updater": {
                "pubkey": "dW50cnVzdGVkIGNvbW1lbnQ6IG1pbmlzaWduIHB1YmxpYyBrZXk=",
                "endpoints": [
                    "https://github.com/cushioncomputing/cushion-desktop/releases/latest/download/latest.json"
                ],
            },
        },
    }


def package_json_text(version: str = "1.2.3") -> str:
    return textwrap.dedent(
        f"""\
        {{
          "name": "cushion-desktop",
          "private": true,
          "version": "{version}",
          "type": "module",
          "scripts": {{
            "tauri": "tauri",
            "build:dev": "DEV_MODE=true node build-config.js && tauri build --debug"
          }},
          "devDependencies": {{
            "@tauri-apps/cli": "^2.0.0"
          }}
        }}
        """
    )


def cargo_toml_text(version: str = "1.2.3") -> str:
    return textwrap.dedent(
        f"""\
        [package]
        name = "cushion-desktop"
        version = "{version}"
        description = "Cushion desktop shell"
        edition = "2021"

        # Keep in sync with package.json
        [lib]
        name = "cushion_desktop_lib"
        crate-type = ["staticlib", "cdylib", "rlib"]

        [dependencies]
        tauri = {{ version = "2", features = ["macos-private-api"] }}
        serde = {{ version = "1", features = ["derive"] }}
        """
    )


@dataclass(frozen=True)
class Checkout:
    root: Path

    @property
    def package_json(self) -> Path:
        return self.root / "package.json"

    @property
    def cargo_toml(self) -> Path:
        return self.root / "src-tauri" / "Cargo.toml"

    @property
    def tauri_conf(self) -> Path:
        return self.root / "src-tauri" / "tauri.conf.json"

    @property
    def backup(self) -> Path:
        return self.root / "src-tauri" / "tauri.conf.json.backup"

    @property
    def manifests(self) -> tuple[Path, Path, Path]:
        return (self.package_json, self.cargo_toml, self.tauri_conf)

    def snapshot(self) -> dict[Path, bytes]:
        return {path: path.read_bytes() for path in self.manifests}

    def load_config(self) -> dict:
        return json.loads(self.tauri_conf.read_text(encoding="utf-8"))


def make_checkout(root: Path, version: str = "1.2.3") -> Checkout:
    """Lay out a minimal Tauri project with all three manifests at ``version``."""

    checkout = Checkout(root)
    checkout.tauri_conf.parent.mkdir(parents=True, exist_ok=True)
    checkout.package_json.write_text(package_json_text(version), encoding="utf-8")
    checkout.cargo_toml.write_text(cargo_toml_text(version), encoding="utf-8")
    checkout.tauri_conf.write_text(json.dumps(tauri_config(version), indent=2) + "\n", encoding="utf-8")
    return checkout
