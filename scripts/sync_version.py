"""Synchronize the release version across package.json, Cargo.toml and tauri.conf.json.

Without a target the current version of every manifest is reported and
nothing is written.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path


def ensure_project_root_on_sys_path() -> Path:
    """Ensure the project root is importable when the script runs standalone."""

    project_root = Path(__file__).resolve().parent.parent
    project_root_str = str(project_root)
    if project_root_str not in sys.path:
        sys.path.insert(0, project_root_str)
    return project_root


ensure_project_root_on_sys_path()

from domain.build import BuildPipelineError
from services.versioning import VersionSynchronizer, build_synchronizer
from shared.logging_config import ensure_app_logging

_LOGGER = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "target",
        nargs="?",
        help="'major', 'minor', 'patch' or an explicit X.Y.Z version.",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Fail unless every manifest carries the same version.",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=Path.cwd(),
        help="Checkout root (defaults to the working directory).",
    )
    return parser.parse_args(argv)


def report_versions(synchronizer: VersionSynchronizer) -> None:
    print("Current versions:")
    for report in synchronizer.current_versions():
        label = f"{report.label}:"
        value = report.version if report.version is not None else "<missing>"
        print(f"  {label:<18} {value}")


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    ensure_app_logging()
    synchronizer = build_synchronizer(args.root)
    try:
        if args.check:
            version = synchronizer.check()
            print(f"All manifests at {version}")
            return 0
        if not args.target:
            print("Usage: sync_version.py [major|minor|patch|<version>]")
            report_versions(synchronizer)
            return 0
        previous = synchronizer.canonical.read_version()
        version = synchronizer.sync(args.target)
    except BuildPipelineError as exc:
        _LOGGER.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(f"Updated version: {previous} -> {version}")
    for manifest in synchronizer.manifests:
        print(f"  - {manifest.path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
