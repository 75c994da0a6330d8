"""Data models used by the release pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Mapping, Tuple

from domain.build.errors import BuildPipelineError
from domain.build.variants import BuildVariant


class PipelineState(str, Enum):
    """States of the release state machine, in execution order."""

    IDLE = "idle"
    VARIANT_RESOLVED = "variant-resolved"
    CONFIG_TRANSFORMED = "config-transformed"
    NATIVE_BUILT = "native-built"
    PACKAGED = "packaged"
    SIGNED = "signed"
    MANIFEST_EMITTED = "manifest-emitted"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class InstallerArtifact:
    """A packaged installer waiting to be signed and published."""

    variant: BuildVariant
    version: str
    product_name: str
    path: Path

    @property
    def asset_name(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class PlatformAsset:
    """Per-platform entry of an update feed."""

    url: str
    signature: str
    sha256: str

    def to_dict(self) -> dict[str, str]:
        return {"url": self.url, "signature": self.signature, "sha256": self.sha256}


@dataclass(frozen=True)
class UpdateManifest:
    """Update feed the installed app polls for newer releases."""

    version: str
    pub_date: str
    platforms: Mapping[str, PlatformAsset]
    notes: str = ""

    def to_dict(self) -> dict[str, object]:
        return {
            "version": self.version,
            "notes": self.notes,
            "pub_date": self.pub_date,
            "platforms": {key: asset.to_dict() for key, asset in sorted(self.platforms.items())},
        }


@dataclass
class PipelineReport:
    """What a pipeline run did, stage by stage."""

    history: list[PipelineState] = field(default_factory=lambda: [PipelineState.IDLE])
    variant: BuildVariant | None = None
    installer: InstallerArtifact | None = None
    signed: bool = False
    manifest_path: Path | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def state(self) -> PipelineState:
        return self.history[-1]

    def advance(self, state: PipelineState) -> None:
        self.history.append(state)


@dataclass(frozen=True)
class PipelineFailure:
    """Terminal ``Failed(stage)`` outcome."""

    stage: str
    error: BuildPipelineError

    def __str__(self) -> str:
        return f"Release failed at stage {self.stage}: {self.error}"


@dataclass(frozen=True)
class PipelineOutcome:
    """Result of :meth:`ReleasePipeline.run`: the report plus the failure, if any."""

    report: PipelineReport
    failure: PipelineFailure | None = None

    @property
    def succeeded(self) -> bool:
        return self.failure is None

    @property
    def completed(self) -> Tuple[PipelineState, ...]:
        return tuple(state for state in self.report.history if state is not PipelineState.FAILED)

    def raise_for_failure(self) -> PipelineReport:
        """Return the report of a successful run, re-raising the stage error otherwise."""

        if self.failure is not None:
            raise self.failure.error
        return self.report


__all__ = [
    "InstallerArtifact",
    "PipelineFailure",
    "PipelineOutcome",
    "PipelineReport",
    "PipelineState",
    "PlatformAsset",
    "UpdateManifest",
]
