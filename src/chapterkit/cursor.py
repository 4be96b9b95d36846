"""
Positioned, bounded byte access shared by every binary chapter parser.

A ``ByteCursor`` treats a file (or an in-memory buffer) as a flat, immutable
byte array. All multi-byte integers are read big-endian with ``struct``.

Usage:
    with ByteCursor.open(path) as cursor:
        cursor.seek(4)
        tag = cursor.read(4)
"""

from __future__ import annotations

import io
import logging
import struct
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO

from chapterkit.exceptions import ChapterSourceError, MalformedChapterError, TruncatedReadError

logger = logging.getLogger(__name__)

_UINT_FORMATS = {1: ">B", 2: ">H", 4: ">I", 8: ">Q"}


class ByteCursor:
    """Seekable byte source with exact-length reads.

    Single owner, single thread. Use ``ByteCursor.open`` so the file handle is
    released on every exit path.
    """

    def __init__(self, stream: BinaryIO, *, name: str = "<stream>") -> None:
        self._stream = stream
        self.name = name
        try:
            self._length = stream.seek(0, io.SEEK_END)
            stream.seek(0)
        except OSError as e:
            raise ChapterSourceError(f"Cannot seek in {name}: {e}", path=name) from e
        self._position = 0

    @classmethod
    @contextmanager
    def open(cls, path: Path | str) -> Iterator[ByteCursor]:
        """
        Open a file as a cursor for the duration of a ``with`` block.

        Args:
            path: File to read

        Yields:
            ByteCursor positioned at offset 0

        Raises:
            ChapterSourceError: If the file cannot be opened
        """
        file_path = Path(path)
        try:
            stream = open(file_path, "rb")  # noqa: SIM115
        except OSError as e:
            raise ChapterSourceError(f"Cannot open {file_path}: {e}", path=file_path) from e

        try:
            yield cls(stream, name=str(file_path))
        finally:
            stream.close()

    @classmethod
    def from_bytes(cls, data: bytes, *, name: str = "<bytes>") -> ByteCursor:
        """Wrap an in-memory buffer."""
        return cls(io.BytesIO(data), name=name)

    @property
    def length(self) -> int:
        return self._length

    @property
    def position(self) -> int:
        return self._position

    @property
    def remaining(self) -> int:
        return self._length - self._position

    def seek(self, offset: int) -> None:
        """Move to an absolute offset within ``[0, length]``."""
        if offset < 0 or offset > self._length:
            raise MalformedChapterError(
                f"Seek to {offset} outside stream of {self._length} bytes",
                offset=offset,
            )
        self._position = offset

    def skip(self, count: int) -> None:
        self.seek(self._position + count)

    def read(self, count: int) -> bytes:
        """
        Read exactly ``count`` bytes from the current position.

        Raises:
            TruncatedReadError: If fewer bytes remain
            ChapterSourceError: If the underlying read fails
        """
        if count < 0:
            raise MalformedChapterError(f"Negative read length: {count}", offset=self._position)
        if count > self.remaining:
            raise TruncatedReadError(
                f"Read of {count} bytes at {self._position} runs past end of {self.name}",
                offset=self._position,
                requested=count,
                available=self.remaining,
            )
        try:
            self._stream.seek(self._position)
            data = self._stream.read(count)
        except OSError as e:
            raise ChapterSourceError(f"Read failed on {self.name}: {e}", path=self.name) from e

        if len(data) != count:
            # File shrank underneath us
            raise TruncatedReadError(
                f"Short read at {self._position}: wanted {count}, got {len(data)}",
                offset=self._position,
                requested=count,
                available=len(data),
            )
        self._position += count
        return data

    def peek(self, count: int) -> bytes:
        """Read up to ``count`` bytes without moving the cursor."""
        start = self._position
        data = self.read(min(count, self.remaining))
        self._position = start
        return data

    def read_uint(self, size: int) -> int:
        """Read a big-endian unsigned integer of ``size`` bytes (0-8)."""
        if size < 0 or size > 8:
            raise MalformedChapterError(f"Unsupported integer width: {size}", offset=self._position)
        fmt = _UINT_FORMATS.get(size)
        if fmt is not None:
            value: int = struct.unpack(fmt, self.read(size))[0]
            return value
        return int.from_bytes(self.read(size), "big")

    def read_u8(self) -> int:
        return self.read_uint(1)

    def read_u16(self) -> int:
        return self.read_uint(2)

    def read_u32(self) -> int:
        return self.read_uint(4)

    def read_u64(self) -> int:
        return self.read_uint(8)

    def read_utf8(self, count: int) -> str:
        """Read ``count`` bytes and decode them as strict UTF-8."""
        raw = self.read(count)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedChapterError(
                f"Invalid UTF-8 text at {self._position - count}: {e.reason}",
                offset=self._position - count,
            ) from e
