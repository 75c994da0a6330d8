"""Public API for the release pipeline package."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

from app.config import BuildToolConfig, get_build_config
from services.configuration import build_transformer
from services.release.feed import build_update_manifest, feed_file_name, write_update_manifest
from services.release.models import (
    InstallerArtifact,
    PipelineFailure,
    PipelineOutcome,
    PipelineReport,
    PipelineState,
    PlatformAsset,
    UpdateManifest,
)
from services.release.pipeline import ReleasePipeline
from services.release.signing import NotarizationCredentials, Notarizer
from services.release.steps import ReleaseSteps, TauriReleaseSteps
from services.release.tools import SubprocessToolRunner, ToolRunner


def build_release_pipeline(
    root: Path,
    *,
    config: BuildToolConfig | None = None,
    env: Mapping[str, str] | None = None,
    runner: ToolRunner | None = None,
    arch: str | None = None,
    notes: str = "",
    output_dir: Path | None = None,
) -> ReleasePipeline:
    """Wire the Tauri release stages for the checkout at ``root``."""

    config = config or get_build_config()
    env = os.environ if env is None else env
    runner = runner or SubprocessToolRunner(timeout=config.release.tool_timeout_seconds)
    steps = TauriReleaseSteps(
        root,
        config=config,
        runner=runner,
        transformer=build_transformer(root, config),
        env=env,
        arch=arch,
        notes=notes,
        output_dir=output_dir,
    )
    return ReleasePipeline(steps, env=env)


__all__ = [
    "InstallerArtifact",
    "NotarizationCredentials",
    "Notarizer",
    "PipelineFailure",
    "PipelineOutcome",
    "PipelineReport",
    "PipelineState",
    "PlatformAsset",
    "ReleasePipeline",
    "ReleaseSteps",
    "SubprocessToolRunner",
    "TauriReleaseSteps",
    "ToolRunner",
    "UpdateManifest",
    "build_release_pipeline",
    "build_update_manifest",
    "feed_file_name",
    "write_update_manifest",
]
