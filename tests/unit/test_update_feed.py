from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from domain.build import BuildVariant, ConfigWriteError
from services.release import InstallerArtifact, build_update_manifest, feed_file_name, write_update_manifest
from services.release.feed import download_url
from services.release.hashing import calculate_sha256, read_signature, signature_path

_BASE_URL = "https://github.com/cushioncomputing/cushion-desktop/releases/download"
_FIXED_NOW = datetime(2026, 3, 4, 5, 6, 7, 891011, tzinfo=timezone.utc)


def _installer(tmp_path: Path, version: str = "1.2.3", name: str = "Cushion Developer") -> InstallerArtifact:
    path = tmp_path / f"{name}_{version}_aarch64.dmg"
    path.write_bytes(b"installer bytes")
    return InstallerArtifact(variant=BuildVariant.DEVELOPMENT, version=version, product_name=name, path=path)


def _manifest(tmp_path: Path, version: str = "1.2.3", *, clock=lambda: _FIXED_NOW):
    return build_update_manifest(
        _installer(tmp_path, version),
        release_base_url=_BASE_URL,
        platform_key="darwin-aarch64",
        notes="Bug fixes",
        clock=clock,
    )


class TestFeedFileName:
    def test_each_identity_variant_has_its_own_feed(self):
        assert feed_file_name(BuildVariant.PRODUCTION) == "latest.json"
        assert feed_file_name(BuildVariant.DEVELOPMENT) == "latest-dev.json"

    def test_test_builds_publish_no_feed(self):
        assert feed_file_name(BuildVariant.TEST) is None


class TestBuildUpdateManifest:
    def test_manifest_describes_installer(self, tmp_path: Path):
        installer = _installer(tmp_path)
        signature_path(installer.path).write_text("dW50cnVzdGVk\n", encoding="utf-8")

        manifest = build_update_manifest(
            installer, release_base_url=_BASE_URL, platform_key="darwin-aarch64", clock=lambda: _FIXED_NOW
        )

        asset = manifest.platforms["darwin-aarch64"]
        assert manifest.version == "1.2.3"
        assert manifest.pub_date == "2026-03-04T05:06:07Z"
        assert asset.url == f"{_BASE_URL}/v1.2.3/Cushion%20Developer_1.2.3_aarch64.dmg"
        assert asset.signature == "dW50cnVzdGVk"
        assert asset.sha256 == calculate_sha256(installer.path)

    def test_local_clock_is_normalised_to_utc(self, tmp_path: Path):
        local = _FIXED_NOW.astimezone(timezone(timedelta(hours=-5)))

        manifest = _manifest(tmp_path, clock=lambda: local)

        assert manifest.pub_date == "2026-03-04T05:06:07Z"

    def test_missing_signature_publishes_empty_value(self, tmp_path: Path, caplog: pytest.LogCaptureFixture):
        manifest = _manifest(tmp_path)

        assert manifest.platforms["darwin-aarch64"].signature == ""
        assert "No updater signature" in caplog.text

    def test_to_dict_matches_updater_format(self, tmp_path: Path):
        content = _manifest(tmp_path).to_dict()

        assert list(content) == ["version", "notes", "pub_date", "platforms"]
        assert set(content["platforms"]["darwin-aarch64"]) == {"url", "signature", "sha256"}


class TestWriteUpdateManifest:
    def test_writes_indented_json(self, tmp_path: Path):
        destination = tmp_path / "updates" / "latest-dev.json"

        assert write_update_manifest(_manifest(tmp_path), destination) is True

        text = destination.read_text(encoding="utf-8")
        assert text.endswith("\n")
        assert json.loads(text)["version"] == "1.2.3"

    def test_republishing_same_release_is_a_no_op(self, tmp_path: Path):
        destination = tmp_path / "latest.json"
        write_update_manifest(_manifest(tmp_path), destination)
        before = destination.read_bytes()

        later = _manifest(tmp_path, clock=lambda: _FIXED_NOW + timedelta(hours=1))

        assert write_update_manifest(later, destination) is False
        assert destination.read_bytes() == before

    def test_same_version_with_different_contents_is_refused(self, tmp_path: Path):
        destination = tmp_path / "latest.json"
        write_update_manifest(_manifest(tmp_path), destination)
        published = json.loads(destination.read_text(encoding="utf-8"))
        published["platforms"]["darwin-aarch64"]["sha256"] = "0" * 64
        destination.write_text(json.dumps(published), encoding="utf-8")

        with pytest.raises(ConfigWriteError, match="already published"):
            write_update_manifest(_manifest(tmp_path), destination)

        assert json.loads(destination.read_text(encoding="utf-8")) == published

    def test_newer_published_version_is_refused(self, tmp_path: Path):
        destination = tmp_path / "latest.json"
        write_update_manifest(_manifest(tmp_path, "1.10.0"), destination)
        before = destination.read_bytes()

        with pytest.raises(ConfigWriteError, match="newer version 1.10.0"):
            write_update_manifest(_manifest(tmp_path, "1.9.0"), destination)

        assert destination.read_bytes() == before

    def test_older_published_version_is_replaced(self, tmp_path: Path):
        destination = tmp_path / "latest.json"
        write_update_manifest(_manifest(tmp_path, "1.2.3"), destination)

        assert write_update_manifest(_manifest(tmp_path, "1.2.4"), destination) is True
        assert json.loads(destination.read_text(encoding="utf-8"))["version"] == "1.2.4"

    def test_unreadable_feed_is_replaced(self, tmp_path: Path):
        destination = tmp_path / "latest.json"
        destination.write_text("not json", encoding="utf-8")

        assert write_update_manifest(_manifest(tmp_path), destination) is True


class TestHashing:
    def test_download_url_quotes_asset_name(self):
        assert download_url(_BASE_URL + "/", "0.1.0", "Cushion_0.1.0_aarch64.dmg") == (
            f"{_BASE_URL}/v0.1.0/Cushion_0.1.0_aarch64.dmg"
        )

    def test_blank_signature_file_counts_as_missing(self, tmp_path: Path):
        artifact = tmp_path / "Cushion.dmg"
        artifact.write_bytes(b"x")
        signature_path(artifact).write_text("  \n", encoding="utf-8")

        assert read_signature(artifact) is None

    def test_sha256_of_known_payload(self, tmp_path: Path):
        artifact = tmp_path / "payload.bin"
        artifact.write_bytes(b"abc")

        assert calculate_sha256(artifact) == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
