"""Cross-process advisory locks built on flock(2)."""

from __future__ import annotations

import fcntl
import os
import time
from pathlib import Path
from typing import Optional

from static_routes.exceptions import LockUnavailable


class FileLock:
    """Exclusive lock held on ``path`` for the duration of a ``with`` block.

    Acquisition is retried until ``timeout`` seconds have passed; ``None``
    waits forever.  The lock is released on every exit path, including
    exceptions raised inside the block.
    """

    def __init__(
        self,
        path: Path,
        timeout: Optional[float] = None,
        poll_interval: float = 0.05,
    ) -> None:
        self._path = Path(path)
        self._timeout = timeout
        self._poll_interval = poll_interval
        self._fd: Optional[int] = None

    def __enter__(self) -> "FileLock":
        self.acquire()
        return self

    def __exit__(self, exc_type, value, traceback) -> None:
        self.release()

    def acquire(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self._path, os.O_RDWR | os.O_CREAT | os.O_CLOEXEC, 0o644)
        except OSError as exc:
            raise LockUnavailable(f"cannot open lock file {self._path}: {exc}") from exc

        deadline = None if self._timeout is None else time.monotonic() + self._timeout
        while True:
            try:
                fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
                break
            except BlockingIOError:
                if deadline is not None and time.monotonic() >= deadline:
                    os.close(fd)
                    raise LockUnavailable(
                        f"timed out waiting for lock {self._path}"
                    ) from None
                time.sleep(self._poll_interval)
            except OSError as exc:
                os.close(fd)
                raise LockUnavailable(f"cannot lock {self._path}: {exc}") from exc
        self._fd = fd

    def release(self) -> None:
        if self._fd is None:
            return
        try:
            fcntl.flock(self._fd, fcntl.LOCK_UN)
        finally:
            os.close(self._fd)
            self._fd = None


def lock_path_for(path: Path) -> Path:
    path = Path(path)
    return path.with_name(path.name + ".lock")


def atomic_write(path: Path, text: str) -> None:
    """Replace ``path`` with ``text`` so readers never see a partial file."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f".{path.name}.{os.getpid()}.tmp")
    try:
        tmp.write_text(text)
        os.replace(tmp, path)
    except OSError:
        try:
            tmp.unlink()
        except FileNotFoundError:
            pass
        raise
