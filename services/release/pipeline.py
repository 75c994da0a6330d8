"""Strictly ordered release state machine."""

from __future__ import annotations

import logging
from typing import Mapping

from domain.build.errors import BuildPipelineError, MissingCredentials
from domain.build.variants import resolve_variant
from services.release.constants import (
    STAGE_CONFIGURE,
    STAGE_MANIFEST,
    STAGE_NATIVE_BUILD,
    STAGE_PACKAGE,
    STAGE_RESOLVE,
    STAGE_SIGN,
)
from services.release.models import PipelineFailure, PipelineOutcome, PipelineReport, PipelineState
from services.release.steps import ReleaseSteps

_LOGGER = logging.getLogger(__name__)


class ReleasePipeline:
    """Drive a release from variant resolution to update-feed emission.

    Each stage runs only after its predecessor succeeded.  Missing signing
    credentials skip the ``signed`` state with a warning.  Any other failure
    stops the run at ``failed``; the configuration store keeps its transformed
    contents, and restoring the baseline is left to the operator.
    """

    def __init__(self, steps: ReleaseSteps, *, env: Mapping[str, str | bool] | None = None) -> None:
        self._steps = steps
        self._env = env

    def run(self) -> PipelineOutcome:
        report = PipelineReport()
        stage = STAGE_RESOLVE
        try:
            variant = resolve_variant(self._env)
            report.variant = variant
            report.advance(PipelineState.VARIANT_RESOLVED)
            _LOGGER.info("Releasing %s build", variant.value)

            stage = STAGE_CONFIGURE
            document = self._steps.configure(variant)
            report.advance(PipelineState.CONFIG_TRANSFORMED)

            stage = STAGE_NATIVE_BUILD
            app_bundle = self._steps.build_native(variant, document)
            report.advance(PipelineState.NATIVE_BUILT)

            stage = STAGE_PACKAGE
            installer = self._steps.package(variant, document, app_bundle)
            report.installer = installer
            report.advance(PipelineState.PACKAGED)

            stage = STAGE_SIGN
            try:
                self._steps.sign(installer)
            except MissingCredentials as exc:
                _LOGGER.warning("Skipping notarization of %s: %s", installer.path, exc)
                report.warnings.append(str(exc))
            else:
                report.signed = True
                report.advance(PipelineState.SIGNED)

            stage = STAGE_MANIFEST
            report.manifest_path = self._steps.emit_manifest(installer)
            report.advance(PipelineState.MANIFEST_EMITTED)
        except BuildPipelineError as exc:
            report.advance(PipelineState.FAILED)
            _LOGGER.error("Release failed at stage %s: %s", stage, exc)
            return PipelineOutcome(report=report, failure=PipelineFailure(stage=stage, error=exc))

        report.advance(PipelineState.DONE)
        _LOGGER.info(
            "Release complete: %s (%s)",
            report.installer.path if report.installer else "-",
            "signed" if report.signed else "unsigned",
        )
        return PipelineOutcome(report=report)


__all__ = ["ReleasePipeline"]
