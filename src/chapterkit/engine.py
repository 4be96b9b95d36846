"""
Top-level chapter resolution for media files.

Sniffs the container family and dispatches to the ISO (QuickTime, then Nero)
or Matroska resolver. Each call opens its own cursor and closes it before
returning.

Key functions:
    - resolve_chapters(): Media file -> ChapterResult
    - read_chapters(): Media file -> list[MediaChapter] | None
    - resolve_any(): Media file or .chap file -> ChapterResult
"""

from __future__ import annotations

import logging
from pathlib import Path

from chapterkit.chapfile import resolve_chapter_file
from chapterkit.cursor import ByteCursor
from chapterkit.detect import is_chapter_file, sniff_container
from chapterkit.ebml import resolve_matroska_chapters
from chapterkit.exceptions import ChapterSourceError, MalformedChapterError
from chapterkit.iso import resolve_iso_chapters
from chapterkit.models import ChapterResult, ContainerFamily, MediaChapter

logger = logging.getLogger(__name__)


def resolve_cursor(cursor: ByteCursor) -> ChapterResult:
    """Resolve chapters from an already open cursor."""
    family = sniff_container(cursor)
    if family is ContainerFamily.ISO:
        return resolve_iso_chapters(cursor)
    if family is ContainerFamily.MATROSKA:
        return resolve_matroska_chapters(cursor)
    return ChapterResult.not_found(f"Unrecognized container: {cursor.name}")


def resolve_chapters(path: Path | str) -> ChapterResult:
    """
    Resolve chapters from a media file.

    I/O problems are reported as an IO_ERROR result rather than raised,
    since chapters are a best-effort feature.

    Args:
        path: Media file (mp4/m4a/m4b/mov or mkv/mka/webm)

    Returns:
        ChapterResult with the complete chapter list or the failure reason
    """
    try:
        with ByteCursor.open(path) as cursor:
            result = resolve_cursor(cursor)
    except ChapterSourceError as e:
        logger.warning("Cannot read %s: %s", path, e)
        return ChapterResult.io_error(str(e))
    except MalformedChapterError as e:
        # Sniffing a file that shrank while open
        return ChapterResult.malformed(str(e))

    if result.ok:
        logger.info("Found %d chapters in %s", len(result.chapters), Path(path).name)
    else:
        logger.debug("No chapters in %s (%s): %s", path, result.status.value, result.reason)
    return result


def read_chapters(path: Path | str) -> list[MediaChapter] | None:
    """Chapters of a media file, or None when it has none (or cannot be read)."""
    return resolve_chapters(path).to_list()


def resolve_any(path: Path | str) -> ChapterResult:
    """Resolve a chapter file by extension, anything else as a media file."""
    if is_chapter_file(path):
        return resolve_chapter_file(path)
    return resolve_chapters(path)
