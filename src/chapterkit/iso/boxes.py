"""
ISO base media / QuickTime box scanning.

A box is ``[size:u32][tag:4cc][payload]``. ``size`` counts the header;
``size == 1`` means a 64-bit size follows the tag and ``size == 0`` means the
box runs to the end of the file.

``BoxScanner`` searches siblings inside the current container and keeps an
explicit stack of ``(resume_position, container_end)`` frames: finding a box
descends into it, ``leave()`` returns to the parent so the next sibling search
starts right after the box. Every search is bounded by ``container_end``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from chapterkit.cursor import ByteCursor
from chapterkit.exceptions import MalformedChapterError

logger = logging.getLogger(__name__)

BOX_HEADER_SIZE = 8
EXTENDED_HEADER_SIZE = 16

# Top-level box types accepted when sniffing an ISO-family file
ROOT_ATOM_TYPES: frozenset[bytes] = frozenset(
    {
        b"ftyp",
        b"moov",
        b"mdat",
        b"pdin",
        b"moof",
        b"mfra",
        b"stts",
        b"stsc",
        b"stsz",
        b"meta",
        b"free",
        b"skip",
    }
)


@dataclass(frozen=True)
class Box:
    """Location of one box in the stream."""

    tag: bytes
    start: int  # Offset of the size field
    content_start: int  # First payload byte
    end: int  # One past the last payload byte

    @property
    def content_size(self) -> int:
        return self.end - self.content_start


def read_box_header(cursor: ByteCursor, container_end: int) -> Box:
    """
    Read the box header at the cursor position.

    Args:
        cursor: Cursor positioned on a size field
        container_end: Boundary the box must not cross

    Returns:
        Box with resolved bounds; the cursor is left at ``content_start``

    Raises:
        MalformedChapterError: On undersized or overrunning boxes
    """
    start = cursor.position
    size = cursor.read_u32()
    tag = cursor.read(4)
    header_size = BOX_HEADER_SIZE

    if size == 1:
        size = cursor.read_u64()
        header_size = EXTENDED_HEADER_SIZE
    elif size == 0:
        size = cursor.length - start

    if size < header_size:
        raise MalformedChapterError(
            f"Box {tag!r} at {start} declares size {size} < header {header_size}",
            container="iso",
            offset=start,
        )

    end = start + size
    if end > container_end:
        raise MalformedChapterError(
            f"Box {tag!r} at {start} ends at {end}, past container end {container_end}",
            container="iso",
            offset=start,
        )
    return Box(tag=tag, start=start, content_start=start + header_size, end=end)


def find_box(
    cursor: ByteCursor, tag: bytes, search_start: int, search_end: int
) -> tuple[int, int] | None:
    """
    Find the first box named ``tag`` between two offsets.

    Args:
        cursor: Byte source
        tag: 4-byte box type
        search_start: Offset of the first candidate header
        search_end: Search boundary (exclusive)

    Returns:
        ``(content_start, content_end)`` of the match, or None
    """
    scanner = BoxScanner(cursor, start=search_start, end=search_end)
    box = scanner.find(tag)
    if box is None:
        return None
    return box.content_start, box.end


class BoxScanner:
    """Sibling/child box search with an explicit bounds stack."""

    def __init__(self, cursor: ByteCursor, *, start: int = 0, end: int | None = None) -> None:
        self.cursor = cursor
        self.position = start
        self.container_end = cursor.length if end is None else min(end, cursor.length)
        self._frames: list[tuple[int, int]] = []

    @property
    def depth(self) -> int:
        """Number of boxes currently descended into."""
        return len(self._frames)

    def find(self, tag: bytes) -> Box | None:
        """
        Find the next sibling named ``tag`` and descend into it.

        On a match the parent frame is pushed, ``position`` moves to the box
        payload and ``container_end`` narrows to the box end; the caller must
        ``leave()`` afterwards. On a miss nothing is pushed and ``position``
        is left at ``container_end``.
        """
        if len(tag) != 4:
            raise ValueError(f"Box tag must be 4 bytes, got: {tag!r}")

        while self.position + BOX_HEADER_SIZE <= self.container_end:
            self.cursor.seek(self.position)
            box = read_box_header(self.cursor, self.container_end)
            if box.tag == tag:
                self._frames.append((box.end, self.container_end))
                self.position = box.content_start
                self.container_end = box.end
                return box
            self.position = box.end

        self.position = self.container_end
        return None

    def leave(self) -> None:
        """Return to the parent container, just past the box last found."""
        if not self._frames:
            raise RuntimeError("leave() called without a matching find()")
        self.position, self.container_end = self._frames.pop()

    def rewind(self, offset: int) -> None:
        """Restart sibling search at ``offset`` inside the current container."""
        if offset > self.container_end:
            raise MalformedChapterError(
                f"Rewind target {offset} is past container end {self.container_end}",
                container="iso",
                offset=offset,
            )
        self.position = offset

    @contextmanager
    def child(self, tag: bytes) -> Iterator[Box | None]:
        """
        Find ``tag`` and yield it, leaving the box on every exit path.

        Yields None (and leaves nothing to undo) when the box is absent.
        """
        box = self.find(tag)
        try:
            yield box
        finally:
            if box is not None:
                self.leave()

    def read_payload_u32(self, offset: int) -> int:
        """Read a big-endian u32 at ``offset`` bytes into the current box payload."""
        absolute = self.position + offset
        if absolute + 4 > self.container_end:
            raise MalformedChapterError(
                f"Field at {absolute} lies outside box ending at {self.container_end}",
                container="iso",
                offset=absolute,
            )
        self.cursor.seek(absolute)
        return self.cursor.read_u32()
