"""
Text file writer utilities for config documents.
"""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path


def _ensure_parent_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _target_mode(target: Path) -> int:
    """Permissions for the replacement: the existing file's, else umask-based."""
    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def _atomic_replace(src: Path, dest: Path) -> None:
    """
    Replace destination atomically where possible.
    Uses os.replace for cross-platform atomic replace semantics.
    """
    os.replace(src, dest)


def write_text_atomic(path: str | Path, text: str, encoding: str = "utf-8") -> Path:
    """Write ``text`` to a sibling temp file, fsync it, then swap it into place."""
    target = Path(path)
    _ensure_parent_dir(target)
    tmp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            delete=False, dir=str(target.parent), prefix=f".{target.name}.", suffix=".tmp"
        ) as tmp:
            tmp_path = Path(tmp.name)
            tmp.write(text.encode(encoding))
            tmp.flush()
            os.fsync(tmp.fileno())
        # NamedTemporaryFile creates 0600 files
        os.chmod(tmp_path, _target_mode(target))
        _atomic_replace(tmp_path, target)
    except BaseException:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise
    return target


def write_text_direct(path: str | Path, text: str, encoding: str = "utf-8") -> Path:
    target = Path(path)
    _ensure_parent_dir(target)
    target.write_text(text, encoding=encoding)
    return target
