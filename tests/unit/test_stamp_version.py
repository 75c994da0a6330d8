"""Tests for the release version stamping helper script."""

from pathlib import Path

import pytest

from scripts import stamp_version
from services.versioning import VersionRecord
from tests.helpers import make_checkout


class TestNormalizeRefName:
    def test_strips_single_leading_v(self):
        assert stamp_version.normalize_ref_name("v1.2.3") == "1.2.3"

    def test_returns_input_when_no_v_prefix(self):
        assert stamp_version.normalize_ref_name("1.2.3") == "1.2.3"

    def test_strips_surrounding_whitespace(self):
        assert stamp_version.normalize_ref_name("  v0.9.0  ") == "0.9.0"

    def test_only_strips_single_v_prefix(self):
        assert stamp_version.normalize_ref_name("vv1.0") == "v1.0"


class TestStampVersion:
    def test_writes_normalized_version_to_every_manifest(self, tmp_path: Path):
        checkout = make_checkout(tmp_path, "1.0.0")

        version = stamp_version.stamp_version("v2.5.0", tmp_path)

        assert version == VersionRecord(2, 5, 0)
        assert checkout.load_config()["version"] == "2.5.0"
        assert 'version = "2.5.0"' in checkout.cargo_toml.read_text(encoding="utf-8")
        assert '"version": "2.5.0"' in checkout.package_json.read_text(encoding="utf-8")


class TestMain:
    def test_main_stamps_checkout_root(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]):
        checkout = make_checkout(tmp_path)

        exit_code = stamp_version.main(["v0.1.0", "--root", str(tmp_path)])

        assert exit_code == 0
        assert checkout.load_config()["version"] == "0.1.0"
        assert "Stamped version 0.1.0" in capsys.readouterr().out

    def test_main_rejects_non_release_tags(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]):
        checkout = make_checkout(tmp_path)
        before = checkout.snapshot()

        exit_code = stamp_version.main(["release-candidate", "--root", str(tmp_path)])

        assert exit_code == 1
        assert "Invalid version format" in capsys.readouterr().err
        assert checkout.snapshot() == before
