"""Persistence – artifact storage on the local filesystem."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from snapreg.kernel.errors import NotFoundError, ReadError, WriteError
from snapreg.observability.logging import get_logger

logger = get_logger(__name__)


def ensure_dir(path: str | Path) -> Path:
    """Create *path* (and parents) if missing."""
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise WriteError(path, f"Could not create directory '{path}'", cause=exc) from exc
    return path


def atomic_write_bytes(path: str | Path, data: bytes, *, fsync: bool = True) -> Path:
    """Atomically replace *path* with *data*.

    The bytes go to a temporary file in the destination directory which is
    then renamed over *path*, so either the old file or the new one is
    always present.
    """
    path = Path(path)
    ensure_dir(path.parent)
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    except OSError as exc:
        raise WriteError(path, cause=exc) from exc
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
            fh.flush()
            if fsync:
                os.fsync(fh.fileno())
        os.replace(tmp_name, path)
    except OSError as exc:
        raise WriteError(path, cause=exc) from exc
    finally:
        if os.path.exists(tmp_name):
            try:
                os.remove(tmp_name)
            except OSError:
                logger.debug("snapshot.tmp_cleanup_failed", tmp=tmp_name, exc_info=True)
    return path


def read_bytes(path: str | Path) -> bytes:
    path = Path(path)
    try:
        return path.read_bytes()
    except FileNotFoundError:
        raise NotFoundError("Snapshot artifact", str(path)) from None
    except OSError as exc:
        raise ReadError(path, cause=exc) from exc


__all__ = ["atomic_write_bytes", "ensure_dir", "read_bytes"]
