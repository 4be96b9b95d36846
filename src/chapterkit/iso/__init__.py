"""
ISO base media / QuickTime chapter resolution.

Tries the QuickTime chapter text track first and falls back to the Nero
``chpl`` list when the file has no usable chapter track.
"""

from __future__ import annotations

import logging

from chapterkit.cursor import ByteCursor
from chapterkit.exceptions import ChapterNotFoundError, MalformedChapterError
from chapterkit.iso.boxes import ROOT_ATOM_TYPES, Box, BoxScanner, find_box, read_box_header
from chapterkit.iso.nero import read_nero_chapters
from chapterkit.iso.quicktime import read_quicktime_chapters
from chapterkit.models import ChapterResult, ChapterSource, ParseStatus

logger = logging.getLogger(__name__)

__all__ = [
    "ROOT_ATOM_TYPES",
    "Box",
    "BoxScanner",
    "find_box",
    "read_box_header",
    "read_nero_chapters",
    "read_quicktime_chapters",
    "resolve_iso_chapters",
    "resolve_nero_chapters",
    "resolve_quicktime_chapters",
]


def resolve_quicktime_chapters(cursor: ByteCursor) -> ChapterResult:
    """Resolve only the QuickTime chapter track."""
    return _resolve(cursor, ChapterSource.QUICKTIME)


def resolve_nero_chapters(cursor: ByteCursor) -> ChapterResult:
    """Resolve only the Nero chpl list."""
    return _resolve(cursor, ChapterSource.NERO)


def resolve_iso_chapters(cursor: ByteCursor) -> ChapterResult:
    """
    Resolve chapters from an ISO-family file.

    Args:
        cursor: Cursor over the whole file

    Returns:
        QuickTime chapters if present and valid, otherwise the Nero result
    """
    quicktime = resolve_quicktime_chapters(cursor)
    if quicktime.ok:
        return quicktime

    nero = resolve_nero_chapters(cursor)
    if nero.ok:
        return nero

    # A malformed structure says more than an absent one
    for result in (quicktime, nero):
        if result.status is ParseStatus.MALFORMED:
            return result
    return nero


def _resolve(cursor: ByteCursor, source: ChapterSource) -> ChapterResult:
    scanner = BoxScanner(cursor)
    try:
        with scanner.child(b"moov") as moov:
            if moov is None:
                return ChapterResult.not_found("No moov box", source)
            if source is ChapterSource.QUICKTIME:
                chapters = read_quicktime_chapters(scanner, moov)
            else:
                chapters = read_nero_chapters(scanner, moov)
    except ChapterNotFoundError as e:
        logger.debug("%s chapters not found in %s: %s", source.value, cursor.name, e)
        return ChapterResult.not_found(str(e), source)
    except MalformedChapterError as e:
        logger.debug("%s chapters malformed in %s: %s", source.value, cursor.name, e)
        return ChapterResult.malformed(str(e), source)

    logger.debug("Found %d %s chapters in %s", len(chapters), source.value, cursor.name)
    return ChapterResult.found(chapters, source)
