"""Build, package, notarize and publish the update feed for one build variant.

The variant comes from the environment (``TEST_MODE`` / ``DEV_MODE``).
Notarization runs when ``APPLE_ID``, ``APPLE_PASSWORD`` and ``APPLE_TEAM_ID``
are set and is skipped with a warning otherwise.
"""

from __future__ import annotations

import argparse
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

from services.release import PipelineReport, build_release_pipeline
from shared.logging_config import ensure_app_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument(
        "--root",
        type=Path,
        default=Path.cwd(),
        help="Checkout root (defaults to the working directory).",
    )
    parser.add_argument("--arch", help="Architecture suffix for the installer name.")
    parser.add_argument("--notes", default="", help="Release notes for the update feed.")
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory for latest.json / latest-dev.json.",
    )
    return parser.parse_args(argv)


def print_summary(report: PipelineReport) -> None:
    print("Release complete")
    if report.variant is not None:
        print(f"  Variant:   {report.variant.value}")
    if report.installer is not None:
        print(f"  Installer: {report.installer.path}")
    print(f"  Signed:    {'yes' if report.signed else 'no'}")
    if report.manifest_path is not None:
        print(f"  Feed:      {report.manifest_path}")
    for warning in report.warnings:
        print(f"  warning: {warning}")


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    log_path = ensure_app_logging()
    pipeline = build_release_pipeline(
        args.root,
        arch=args.arch,
        notes=args.notes,
        output_dir=args.output_dir,
    )
    outcome = pipeline.run()
    if outcome.failure is not None:
        print(f"error: {outcome.failure}", file=sys.stderr)
        print(f"See {log_path} for tool output.", file=sys.stderr)
        return 1
    print_summary(outcome.report)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
