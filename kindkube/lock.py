"""Lock files guarding kubeconfig updates, compatible with kubectl."""

from __future__ import annotations

import contextlib
import os
from collections.abc import Iterator


def lock_name(filename: str) -> str:
    """Return the path of the lock file for filename."""
    return filename + ".lock"


def lock_file(filename: str) -> None:
    """Create the lock file for filename, creating its directory if needed.

    Raises FileExistsError if the lock is already held.
    """
    directory = os.path.dirname(filename) or "."
    os.makedirs(directory, mode=0o755, exist_ok=True)
    fd = os.open(lock_name(filename), os.O_RDONLY | os.O_CREAT | os.O_EXCL, 0)
    os.close(fd)


def unlock_file(filename: str) -> None:
    """Remove the lock file for filename."""
    os.remove(lock_name(filename))


@contextlib.contextmanager
def locked(filename: str) -> Iterator[None]:
    """Hold the lock for filename for the duration of the block."""
    lock_file(filename)
    try:
        yield
    finally:
        with contextlib.suppress(OSError):
            unlock_file(filename)