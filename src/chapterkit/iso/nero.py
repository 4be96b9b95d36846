"""
Nero chapter list resolver (``moov/udta/chpl``).

Layout of the chpl payload:

    version (1) + flags (3) + reserved (1)
    chapter count (u32)
    per chapter: timestamp high (u32), timestamp low (u32),
                 title length (u8), title (utf-8)

Timestamps are already 100 ns ticks.
"""

from __future__ import annotations

import logging

from chapterkit.exceptions import ChapterNotFoundError, MalformedChapterError
from chapterkit.iso.boxes import Box, BoxScanner
from chapterkit.models import MediaChapter, fill_end_times

logger = logging.getLogger(__name__)

CHPL_HEADER_SKIP = 5
# Smallest possible chapter record: 8-byte timestamp + 1-byte length
CHPL_ENTRY_MIN_SIZE = 9


def read_nero_chapters(scanner: BoxScanner, moov: Box) -> list[MediaChapter]:
    """
    Decode the first ``chpl`` box found under any ``udta`` child of moov.

    Args:
        scanner: Scanner descended into ``moov``
        moov: The movie box

    Returns:
        Chapters with end times forward-filled

    Raises:
        ChapterNotFoundError: No udta/chpl, or an empty list
        MalformedChapterError: Truncated records or invalid titles
    """
    scanner.rewind(moov.content_start)
    while True:
        with scanner.child(b"udta") as udta:
            if udta is None:
                raise ChapterNotFoundError("No udta/chpl box in moov", container="nero")
            with scanner.child(b"chpl") as chpl:
                if chpl is None:
                    logger.debug("udta at %d has no chpl, trying next sibling", udta.start)
                    continue
                chapters = _read_chpl(scanner, chpl)

        return fill_end_times(chapters)


def _read_chpl(scanner: BoxScanner, chpl: Box) -> list[MediaChapter]:
    cursor = scanner.cursor
    cursor.seek(chpl.content_start)
    if chpl.content_size < CHPL_HEADER_SKIP + 4:
        raise MalformedChapterError(
            f"chpl box at {chpl.start} is too small", container="nero", offset=chpl.start
        )
    cursor.skip(CHPL_HEADER_SKIP)
    count = cursor.read_u32()
    if count == 0:
        raise ChapterNotFoundError("chpl box lists no chapters", container="nero")

    chapters: list[MediaChapter] = []
    for index in range(count):
        if cursor.position + CHPL_ENTRY_MIN_SIZE > chpl.end:
            raise MalformedChapterError(
                f"chpl entry {index} runs past the box end",
                container="nero",
                offset=cursor.position,
            )
        high = cursor.read_u32()
        low = cursor.read_u32()
        length = cursor.read_u8()
        if cursor.position + length > chpl.end:
            raise MalformedChapterError(
                f"chpl title {index} runs past the box end",
                container="nero",
                offset=cursor.position,
            )
        title = cursor.read_utf8(length)
        chapters.append(MediaChapter.single(title, (high << 32) | low))
    return chapters
