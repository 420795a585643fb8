"""Unpacking tar streams of node log directories onto the host."""

from __future__ import annotations

import logging
import os
import shutil
import tarfile
from typing import BinaryIO

_BLOCK = tarfile.BLOCKSIZE
_CHUNK = 64 * 1024


class _Prefixed:
    """A readable stream that yields already-read bytes before the rest."""

    def __init__(self, prefix: bytes, stream: BinaryIO) -> None:
        self._prefix = prefix
        self._stream = stream

    def read(self, size: int = -1) -> bytes:
        if not self._prefix:
            return self._stream.read(size)
        if size is None or size < 0:
            data, self._prefix = self._prefix + self._stream.read(), b""
            return data
        data, self._prefix = self._prefix[:size], self._prefix[size:]
        if len(data) < size:
            data += self._stream.read(size - len(data))
        return data


def _write_member(tar: tarfile.TarFile, member: tarfile.TarInfo, target: str) -> None:
    source = tar.extractfile(member)
    fd = os.open(target, os.O_CREAT | os.O_RDWR, member.mode & 0o7777)
    written = 0
    try:
        with os.fdopen(fd, "wb") as handle:
            if source is not None:
                while chunk := source.read(_CHUNK):
                    handle.write(chunk)
                    written += len(chunk)
    except (OSError, tarfile.TarError) as exc:
        raise OSError(f"error writing to {target}: {exc}") from exc
    if written != member.size:
        raise OSError(f"only wrote {written} bytes to {target}; expected {member.size}")


def untar(stream: BinaryIO, directory: str, logger: logging.Logger | None = None) -> None:
    """Unpack the uncompressed tar read from stream into directory.

    Regular files and directories are created; other entries are skipped
    with a warning. The stream is drained to its end afterwards.
    """
    logger = logger or logging.getLogger(__name__)
    first = stream.read(_BLOCK)
    if first:
        try:
            tar = tarfile.open(fileobj=_Prefixed(first, stream), mode="r|")
        except tarfile.TarError as exc:
            raise tarfile.ReadError(f"tar reading error: {exc}") from exc
        with tar:
            members = iter(tar)
            while True:
                try:
                    member = next(members)
                except StopIteration:
                    break
                except tarfile.TarError as exc:
                    raise tarfile.ReadError(f"tar reading error: {exc}") from exc
                target = os.path.normpath(os.path.join(directory, *member.name.split("/")))
                if member.isreg():
                    _write_member(tar, member, target)
                elif member.isdir():
                    if not os.path.exists(target):
                        os.makedirs(target, mode=0o755, exist_ok=True)
                else:
                    logger.warning(
                        "tar file entry %s contained unsupported file type %d",
                        member.name,
                        ord(member.type),
                    )
    # trailing padding must be consumed so the writer is not left hanging
    shutil.copyfileobj(stream, _Discard(), _CHUNK)


class _Discard:
    def write(self, data: bytes) -> int:
        return len(data)