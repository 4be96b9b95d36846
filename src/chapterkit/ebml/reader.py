"""
EBML variable-length integer decoding.

Element IDs and data sizes are both VINTs: the number of leading zero bits in
the first byte, plus one, is the total length. IDs keep their marker bit and
are compared as raw bytes; sizes have it masked off.

    1xxxxxxx                     1 byte
    01xxxxxx xxxxxxxx            2 bytes
    001xxxxx ...                 3 bytes
    ...
    00000001 ...                 8 bytes (sizes only; IDs stop at 4)
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from chapterkit.cursor import ByteCursor
from chapterkit.ebml.ids import element_name
from chapterkit.exceptions import MalformedChapterError

logger = logging.getLogger(__name__)

MAX_ID_LENGTH = 4
MAX_SIZE_LENGTH = 8


def vint_length(first_byte: int, max_length: int) -> int:
    """
    Length in bytes of a VINT from its first byte.

    Raises:
        MalformedChapterError: If no marker bit is set within ``max_length``
    """
    for length in range(1, max_length + 1):
        if first_byte & (0x80 >> (length - 1)):
            return length
    raise MalformedChapterError(
        f"Invalid VINT lead byte 0x{first_byte:02X} (max length {max_length})",
        container="matroska",
    )


def unknown_size(length: int) -> int:
    """Reserved all-ones size value meaning 'unknown' for a size field of ``length`` bytes."""
    return (1 << (7 * length)) - 1


def encode_element_id(value: int) -> bytes:
    """Raw bytes of an element ID given as an integer (e.g. 0x1A45DFA3)."""
    length = max(1, (value.bit_length() + 7) // 8)
    if length > MAX_ID_LENGTH:
        raise ValueError(f"Element ID too long: 0x{value:X}")
    return value.to_bytes(length, "big")


def encode_data_size(value: int, length: int | None = None) -> bytes:
    """Encode a data size as a VINT, using the shortest length unless given."""
    if length is None:
        length = 1
        while value >= unknown_size(length):
            length += 1
    if length > MAX_SIZE_LENGTH or value >= unknown_size(length):
        raise ValueError(f"Size {value} does not fit in {length} bytes")
    marker = 1 << (7 * length)
    return (marker | value).to_bytes(length, "big")


@dataclass(frozen=True)
class Element:
    """Location of one EBML element."""

    id: bytes
    start: int  # First byte of the ID
    data_start: int
    end: int  # One past the last data byte

    @property
    def size(self) -> int:
        return self.end - self.data_start

    @property
    def name(self) -> str:
        return element_name(self.id)


class EbmlReader:
    """Reads EBML headers and primitive payloads from a cursor."""

    def __init__(self, cursor: ByteCursor) -> None:
        self.cursor = cursor

    def read_element_id(self) -> bytes:
        """Read one element ID (1-4 bytes) with its marker bits intact."""
        start = self.cursor.position
        length = vint_length(self.cursor.read_u8(), MAX_ID_LENGTH)
        self.cursor.seek(start)
        return self.cursor.read(length)

    def read_data_size(self) -> int:
        """Read one data size (1-8 bytes) with the marker bit stripped."""
        first = self.cursor.read_u8()
        length = vint_length(first, MAX_SIZE_LENGTH)
        value = first & (0xFF >> length)
        for byte in self.cursor.read(length - 1):
            value = (value << 8) | byte
        return value

    def read_element_header(self, limit: int | None = None) -> Element:
        """
        Read an element header at the cursor position.

        Args:
            limit: Container boundary the element must not cross. Elements of
                unknown size are clamped to it.

        Returns:
            Element with resolved bounds; the cursor is left at ``data_start``
        """
        if limit is None:
            limit = self.cursor.length
        start = self.cursor.position
        element_id = self.read_element_id()
        size_start = self.cursor.position
        size = self.read_data_size()
        data_start = self.cursor.position

        if size == unknown_size(data_start - size_start):
            end = limit
        else:
            end = data_start + size
        if end > limit:
            raise MalformedChapterError(
                f"{element_name(element_id)} at {start} ends at {end}, past boundary {limit}",
                container="matroska",
                offset=start,
            )
        return Element(id=element_id, start=start, data_start=data_start, end=end)

    def expect(self, element_id: bytes, limit: int | None = None) -> Element:
        """Read a header and require a specific element ID."""
        element = self.read_element_header(limit)
        if element.id != element_id:
            raise MalformedChapterError(
                f"Expected {element_name(element_id)} at {element.start}, found {element.name}",
                container="matroska",
                offset=element.start,
            )
        return element

    def iter_children(self, parent: Element) -> Iterator[Element]:
        """Yield each direct child of ``parent``, bounded by its end."""
        position = parent.data_start
        while position < parent.end:
            self.cursor.seek(position)
            child = self.read_element_header(parent.end)
            yield child
            position = child.end

    def read_uint(self, element: Element) -> int:
        """Big-endian unsigned payload (0-8 bytes)."""
        if element.size > 8:
            raise MalformedChapterError(
                f"{element.name} at {element.start} has {element.size}-byte integer",
                container="matroska",
                offset=element.start,
            )
        self.cursor.seek(element.data_start)
        return self.cursor.read_uint(element.size)

    def read_bytes(self, element: Element) -> bytes:
        self.cursor.seek(element.data_start)
        return self.cursor.read(element.size)

    def read_string(self, element: Element) -> str:
        """UTF-8 payload with trailing NUL padding removed."""
        self.cursor.seek(element.data_start)
        return self.cursor.read_utf8(element.size).rstrip("\x00")
