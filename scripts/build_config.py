"""Apply the build variant requested through the environment to tauri.conf.json.

``TEST_MODE=true`` points the bundled frontend at the local dev server,
``DEV_MODE=true`` switches to the Cushion Developer identity, and anything else
configures a production build.  The untouched configuration is saved once as
``tauri.conf.json.backup``; ``--restore`` copies it back.
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

from domain.build import BuildPipelineError, resolve_variant
from services.configuration import build_transformer
from shared.logging_config import ensure_app_logging

_LOGGER = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument(
        "--root",
        type=Path,
        default=Path.cwd(),
        help="Checkout root containing src-tauri/ (defaults to the working directory).",
    )
    parser.add_argument(
        "--restore",
        action="store_true",
        help="Restore tauri.conf.json from the saved baseline instead of applying a variant.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    ensure_app_logging()
    transformer = build_transformer(args.root)
    try:
        if args.restore:
            transformer.restore_baseline()
            print(f"Restored {transformer.store.path} from {transformer.backup.path}")
            return 0

        variant = resolve_variant()
        document = transformer.apply(variant)
    except BuildPipelineError as exc:
        _LOGGER.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(f"Configuration updated for {variant.value} build")
    print(f"  productName:  {document.product_name}")
    print(f"  identifier:   {document.identifier}")
    print(f"  frontendDist: {document.dist_url}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
