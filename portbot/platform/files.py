"""File writing for port files and staged copies."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

__all__ = ["atomic_write_text", "temporary_text_file"]

# sudo cp keeps the source mode; unprivileged steps read the copies back
_FILE_MODE = 0o644


def _write_fd(fd: int, content: str, *, fsync: bool) -> None:
    # newline="" keeps LF endings; vcpkg hashes port files byte for byte
    with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
        handle.write(content)
        if fsync:
            handle.flush()
            os.fsync(handle.fileno())


def atomic_write_text(path: Path, content: str) -> None:
    """Replace path with content, so readers never see a partial file.

    Parent directories are created as needed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp = Path(tmp_name)
    try:
        _write_fd(fd, content, fsync=True)
        os.chmod(tmp, _FILE_MODE)
        os.replace(tmp, path)
    finally:
        tmp.unlink(missing_ok=True)


@contextmanager
def temporary_text_file(content: str, *, prefix: str) -> Iterator[Path]:
    """Yield a temp file holding content; it is removed on exit.

    Used to stage files that a privileged copy moves into place.
    """
    fd, tmp_name = tempfile.mkstemp(prefix=prefix)
    tmp = Path(tmp_name)
    try:
        _write_fd(fd, content, fsync=False)
        os.chmod(tmp, _FILE_MODE)
        yield tmp
    finally:
        tmp.unlink(missing_ok=True)
