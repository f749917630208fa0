"""File handle plus explicit cursor used by every pipeline phase."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import BinaryIO

logger = logging.getLogger(__name__)


class AudioStream:
    """An open file with its own byte cursor and length.

    All reads and writes name an absolute offset; the cursor is only advanced
    by this object, never shared between streams.
    """

    def __init__(self, path: Path, handle: BinaryIO, length: int, writable: bool) -> None:
        self.path = path
        self._handle: BinaryIO | None = handle
        self.length = length
        self.offset = 0
        self.writable = writable

    @classmethod
    def open_read(cls, path: str | Path) -> AudioStream:
        file_path = Path(path)
        handle = open(file_path, "rb")
        try:
            length = os.fstat(handle.fileno()).st_size
        except OSError:
            handle.close()
            raise
        logger.debug("opened %s for reading (%d bytes)", file_path, length)
        return cls(file_path, handle, length, writable=False)

    @classmethod
    def create(cls, path: str | Path) -> AudioStream:
        file_path = Path(path)
        if file_path.exists():
            file_path.unlink()
        handle = open(file_path, "w+b")
        logger.debug("created %s", file_path)
        return cls(file_path, handle, 0, writable=True)

    @property
    def closed(self) -> bool:
        return self._handle is None

    def read_at(self, offset: int, size: int) -> bytes:
        """Read up to ``size`` bytes at ``offset``; short only at end of file."""
        handle = self._require_handle()
        if offset < 0 or offset > self.length:
            raise ValueError(f"read offset {offset} outside stream of {self.length} bytes")
        size = max(0, min(size, self.length - offset))
        handle.seek(offset)
        data = handle.read(size)
        self.offset = offset + len(data)
        return data

    def write_at(self, offset: int, data: bytes) -> None:
        handle = self._require_handle()
        if not self.writable:
            raise OSError(f"{self.path} is open read-only")
        if offset < 0 or offset > self.length:
            raise ValueError(f"write offset {offset} outside stream of {self.length} bytes")
        handle.seek(offset)
        handle.write(data)
        self.offset = offset + len(data)
        self.length = max(self.length, self.offset)

    def append(self, data: bytes) -> None:
        self.write_at(self.length, data)

    def close(self) -> None:
        if self._handle is None:
            return
        self._handle.close()
        self._handle = None

    def _require_handle(self) -> BinaryIO:
        if self._handle is None:
            raise ValueError(f"{self.path} is closed")
        return self._handle

    def __enter__(self) -> AudioStream:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
