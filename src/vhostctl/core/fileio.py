"""Crash-safe file writes shared by the registry store and the hosts editor."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Callable, Optional, TextIO


def atomic_write(
    path: Path,
    write_fn: Callable[[TextIO], None],
    *,
    encoding: str = "utf-8",
    mode: int | None = None,
) -> None:
    """Write to ``path`` atomically using a temp file + fsync + rename.

    - Parent directory is created if missing
    - Data is written to a temporary file in the same directory
    - File is fsync'd, then atomically replaced
    - Any leftover temp file is cleaned up on failure

    Args:
        path: Target file path
        write_fn: Callable that writes content to the file object
        encoding: Text encoding (default: utf-8)
        mode: Permission bits for the new file; defaults to the mode of the
            file being replaced, if any
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if mode is None and path.exists():
        mode = path.stat().st_mode & 0o7777

    tmp_path: Optional[Path] = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding=encoding,
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_path = Path(f.name)
            write_fn(f)
            f.flush()
            os.fsync(f.fileno())

        if mode is not None:
            os.chmod(tmp_path, mode)
        os.replace(str(tmp_path), str(path))
    finally:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink(missing_ok=True)


def atomic_write_text(path: Path, content: str, *, mode: int | None = None) -> None:
    """Atomically write UTF-8 text to ``path``."""
    atomic_write(path, lambda f: f.write(content), mode=mode)
