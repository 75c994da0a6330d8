from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_project_root_on_path() -> None:
    """Guarantee the repository root is discoverable for absolute imports."""

    root = Path(__file__).resolve().parent.parent
    root_str = str(root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)

    tests_dir = root / "tests"
    tests_str = str(tests_dir)
    if tests_str not in sys.path:
        sys.path.insert(1, tests_str)


_ensure_project_root_on_path()

from app.config import CONFIG_PATH_ENV, reset_build_config_cache
from domain.build.variants import DEV_FLAG, LEGACY_DEV_FLAG, LEGACY_TEST_FLAG, TEST_FLAG
from services.release.constants import NOTARIZATION_ENV_VARS
from shared import logging_config


_ISOLATED_ENV_VARS = (
    TEST_FLAG,
    DEV_FLAG,
    LEGACY_TEST_FLAG,
    LEGACY_DEV_FLAG,
    CONFIG_PATH_ENV,
    "CUSHION_BUILD_LOG_FILE",
    *NOTARIZATION_ENV_VARS,
)


@pytest.fixture(autouse=True)
def _isolated_build_env(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory):
    """Keep CI variables and user log directories out of every test."""

    for name in _ISOLATED_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    log_dir = tmp_path_factory.mktemp("logs")
    monkeypatch.setenv("CUSHION_BUILD_LOG_DIR", str(log_dir))
    reset_build_config_cache()

    yield

    logging_config._reset_for_tests()
    reset_build_config_cache()
