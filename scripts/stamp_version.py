"""Stamp every version manifest from a Git tag or ref name."""

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
from services.versioning import VersionRecord, build_synchronizer
from shared.logging_config import ensure_app_logging

_LOGGER = logging.getLogger(__name__)


def normalize_ref_name(ref_name: str) -> str:
    """Normalize a Git ref name to a bare semantic version string."""

    stripped = ref_name.strip()
    if stripped.startswith("v"):
        return stripped[1:]
    return stripped


def stamp_version(ref_name: str, root: Path) -> VersionRecord:
    """Write the version derived from *ref_name* into every manifest under *root*."""

    normalized = normalize_ref_name(ref_name)
    return build_synchronizer(root).sync(normalized)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "ref_name",
        help="Git ref name to stamp (e.g. 'v1.2.3').",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=Path.cwd(),
        help="Checkout root whose manifests should be stamped.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    ensure_app_logging()
    try:
        version = stamp_version(args.ref_name, args.root)
    except BuildPipelineError as exc:
        _LOGGER.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(f"Stamped version {version}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
