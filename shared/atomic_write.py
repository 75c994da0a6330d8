"""Replace-on-success file writes."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path


def _default_file_mode() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_text_atomic(path: Path, text: str) -> None:
    """Write ``text`` to ``path`` so readers see either the old or new contents.

    The payload goes to a temporary file in the destination directory which is
    then renamed over ``path``.  An existing file keeps its permissions; a new
    one gets the mode ``open()`` would have given it.  Raises :class:`OSError`
    on failure, in which case ``path`` is left untouched.
    """

    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(text)
        mode = path.stat().st_mode & 0o7777 if path.exists() else _default_file_mode()
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


__all__ = ["write_text_atomic"]
