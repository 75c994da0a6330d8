"""Concrete release stages for the Tauri desktop shell."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Callable, Mapping, Protocol

from app.config import BuildToolConfig
from domain.build.errors import ConfigReadError, ConfigWriteError, ExternalToolFailure
from domain.build.variants import BuildVariant
from services.configuration import ConfigurationDocument, ConfigurationTransformer
from services.release.constants import DMG_FORMAT, STAGE_NATIVE_BUILD, STAGE_PACKAGE
from services.release.feed import build_update_manifest, feed_file_name, utc_now, write_update_manifest
from services.release.models import InstallerArtifact
from services.release.signing import NotarizationCredentials, Notarizer
from services.release.tools import ToolRunner
from services.versioning.semver import VersionRecord

_LOGGER = logging.getLogger(__name__)


class ReleaseSteps(Protocol):
    """Stages driven, in order, by :class:`~services.release.pipeline.ReleasePipeline`."""

    def configure(self, variant: BuildVariant) -> ConfigurationDocument:
        """Apply ``variant`` to the configuration store."""

    def build_native(self, variant: BuildVariant, document: ConfigurationDocument) -> Path:
        """Build the native app and return the app bundle path."""

    def package(
        self, variant: BuildVariant, document: ConfigurationDocument, app_bundle: Path
    ) -> InstallerArtifact:
        """Wrap the app bundle in an installer."""

    def sign(self, installer: InstallerArtifact) -> None:
        """Notarize the installer; raise ``MissingCredentials`` to skip."""

    def emit_manifest(self, installer: InstallerArtifact) -> Path | None:
        """Write the variant's update feed, returning its path."""


class TauriReleaseSteps:
    """Release stages backed by ``tauri``, ``hdiutil`` and ``xcrun``."""

    def __init__(
        self,
        root: Path,
        *,
        config: BuildToolConfig,
        runner: ToolRunner,
        transformer: ConfigurationTransformer,
        env: Mapping[str, str] | None = None,
        arch: str | None = None,
        notes: str = "",
        output_dir: Path | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._root = Path(root)
        self._config = config
        self._runner = runner
        self._transformer = transformer
        self._notarizer = Notarizer(runner)
        self._env = os.environ if env is None else env
        self._arch = arch or config.release.default_arch
        self._notes = notes
        self._output_dir = (
            Path(output_dir) if output_dir is not None else config.paths.resolve(self._root, "update_feed_dir")
        )
        self._clock = clock

    def bundle_dir(self, variant: BuildVariant) -> Path:
        name = "debug_bundle_dir" if variant is BuildVariant.DEVELOPMENT else "release_bundle_dir"
        return self._config.paths.resolve(self._root, name)

    def configure(self, variant: BuildVariant) -> ConfigurationDocument:
        return self._transformer.apply(variant)

    def build_native(self, variant: BuildVariant, document: ConfigurationDocument) -> Path:
        command = ["npx", "tauri", "build", "--bundles", "app"]
        if variant is BuildVariant.DEVELOPMENT:
            command.append("--debug")
        self._runner.run(STAGE_NATIVE_BUILD, command, cwd=self._root)

        product_name = self._product_name(document, STAGE_NATIVE_BUILD)
        app_bundle = self.bundle_dir(variant) / "macos" / f"{product_name}.app"
        if not app_bundle.exists():
            raise ExternalToolFailure(
                "Native build finished without producing the app bundle",
                stage=STAGE_NATIVE_BUILD,
                command=command,
                path=app_bundle,
            )
        _LOGGER.info("Built %s", app_bundle)
        return app_bundle

    def package(
        self, variant: BuildVariant, document: ConfigurationDocument, app_bundle: Path
    ) -> InstallerArtifact:
        product_name = self._product_name(document, STAGE_PACKAGE)
        version = VersionRecord.parse(
            document.version,
            stage=STAGE_PACKAGE,
            path=self._transformer.store.path,
        )
        dmg_path = self.bundle_dir(variant) / "dmg" / f"{product_name}_{version}_{self._arch}.dmg"
        try:
            dmg_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigWriteError(
                f"Unable to create installer directory: {exc}", stage=STAGE_PACKAGE, path=dmg_path.parent
            ) from exc
        self._runner.run(
            STAGE_PACKAGE,
            (
                "hdiutil",
                "create",
                "-volname",
                product_name,
                "-srcfolder",
                str(app_bundle),
                "-ov",
                "-format",
                DMG_FORMAT,
                str(dmg_path),
            ),
        )
        _LOGGER.info("Created installer %s", dmg_path)
        return InstallerArtifact(
            variant=variant,
            version=str(version),
            product_name=product_name,
            path=dmg_path,
        )

    def sign(self, installer: InstallerArtifact) -> None:
        credentials = NotarizationCredentials.from_env(self._env)
        self._notarizer.notarize(installer.path, credentials)

    def emit_manifest(self, installer: InstallerArtifact) -> Path | None:
        name = feed_file_name(installer.variant)
        if name is None:
            _LOGGER.info("No update feed for %s builds", installer.variant.value)
            return None
        manifest = build_update_manifest(
            installer,
            release_base_url=self._config.release.release_base_url,
            platform_key=self._config.release.platform_key,
            notes=self._notes,
            clock=self._clock,
        )
        destination = self._output_dir / name
        write_update_manifest(manifest, destination)
        return destination

    def _product_name(self, document: ConfigurationDocument, stage: str) -> str:
        product_name = document.product_name
        if not isinstance(product_name, str) or not product_name.strip():
            raise ConfigReadError(
                "Configuration has no product name",
                stage=stage,
                path=self._transformer.store.path,
                field="productName",
            )
        return product_name


__all__ = ["ReleaseSteps", "TauriReleaseSteps"]
