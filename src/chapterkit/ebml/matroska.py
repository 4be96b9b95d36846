"""
Matroska chapter resolver.

Chapters are located through the SeekHead that must directly follow the
Segment header; SeekPosition values are relative to the start of the Segment
data. Files whose SeekHead has no Chapters entry are reported as having no
chapters (no full-segment scan is attempted).

    EBML
    Segment
      SeekHead
        Seek { SeekID = Chapters, SeekPosition }
      ...
      Chapters
        EditionEntry
          ChapterAtom
            ChapterTimeStart (ns)
            ChapterTimeEnd (ns, optional)
            ChapterDisplay { ChapString, ChapLanguage } *
"""

from __future__ import annotations

import logging

from chapterkit.cursor import ByteCursor
from chapterkit.ebml import ids
from chapterkit.ebml.reader import EbmlReader, Element
from chapterkit.exceptions import ChapterNotFoundError, MalformedChapterError
from chapterkit.models import (
    NANOSECONDS_PER_TICK,
    ChapterResult,
    ChapterSource,
    MediaChapter,
    fill_end_times,
)

logger = logging.getLogger(__name__)


def resolve_matroska_chapters(cursor: ByteCursor) -> ChapterResult:
    """
    Resolve chapters from a Matroska/WebM file.

    Args:
        cursor: Cursor over the whole file

    Returns:
        FOUND with every chapter of the first edition, or a failure result
    """
    try:
        chapters = read_matroska_chapters(cursor)
    except ChapterNotFoundError as e:
        logger.debug("Matroska chapters not found in %s: %s", cursor.name, e)
        return ChapterResult.not_found(str(e), ChapterSource.MATROSKA)
    except MalformedChapterError as e:
        logger.debug("Matroska chapters malformed in %s: %s", cursor.name, e)
        return ChapterResult.malformed(str(e), ChapterSource.MATROSKA)

    logger.debug("Found %d Matroska chapters in %s", len(chapters), cursor.name)
    return ChapterResult.found(chapters, ChapterSource.MATROSKA)


def read_matroska_chapters(cursor: ByteCursor) -> list[MediaChapter]:
    """
    Decode the first edition of the Chapters element.

    Raises:
        ChapterNotFoundError: No Chapters entry in the SeekHead, or no chapters
        MalformedChapterError: Unexpected elements, bad sizes, invalid atoms
    """
    reader = EbmlReader(cursor)
    cursor.seek(0)
    header = reader.expect(ids.EBML_HEADER)
    cursor.seek(header.end)
    segment = reader.expect(ids.SEGMENT)
    segment_start = segment.data_start

    chapters_offset = _find_chapters_offset(reader, segment)
    if chapters_offset >= segment.end:
        raise MalformedChapterError(
            f"Chapters seek position {chapters_offset} lies outside the Segment",
            container="matroska",
            offset=chapters_offset,
        )
    logger.debug("Chapters element at %d (segment data at %d)", chapters_offset, segment_start)

    cursor.seek(chapters_offset)
    chapters_element = reader.expect(ids.CHAPTERS, segment.end)
    cursor.seek(chapters_element.data_start)
    edition = reader.expect(ids.EDITION_ENTRY, chapters_element.end)

    chapters = [
        _read_chapter_atom(reader, atom)
        for atom in reader.iter_children(edition)
        if atom.id == ids.CHAPTER_ATOM
    ]
    if not chapters:
        raise ChapterNotFoundError("EditionEntry has no ChapterAtom", container="matroska")
    return fill_end_times(chapters)


def _find_chapters_offset(reader: EbmlReader, segment: Element) -> int:
    """Absolute offset of the Chapters element according to the SeekHead."""
    reader.cursor.seek(segment.data_start)
    seek_head = reader.expect(ids.SEEK_HEAD, segment.end)

    for seek in reader.iter_children(seek_head):
        if seek.id != ids.SEEK:
            continue
        seek_id: bytes | None = None
        seek_position: int | None = None
        for entry in reader.iter_children(seek):
            if entry.id == ids.SEEK_ID:
                seek_id = reader.read_bytes(entry)
            elif entry.id == ids.SEEK_POSITION:
                seek_position = reader.read_uint(entry)
        if seek_id == ids.CHAPTERS and seek_position is not None:
            return segment.data_start + seek_position

    raise ChapterNotFoundError("SeekHead has no Chapters entry", container="matroska")


def _read_chapter_atom(reader: EbmlReader, atom: Element) -> MediaChapter:
    start_ns: int | None = None
    end_ns: int | None = None
    titles: list[str] = []
    languages: list[str] = []

    for child in reader.iter_children(atom):
        if child.id == ids.CHAPTER_TIME_START:
            start_ns = reader.read_uint(child)
        elif child.id == ids.CHAPTER_TIME_END:
            end_ns = reader.read_uint(child)
        elif child.id == ids.CHAPTER_DISPLAY:
            for display_child in reader.iter_children(child):
                if display_child.id == ids.CHAPTER_STRING:
                    titles.append(reader.read_string(display_child))
                elif display_child.id == ids.CHAPTER_LANGUAGE:
                    languages.append(reader.read_string(display_child))

    if start_ns is None:
        raise MalformedChapterError(
            f"ChapterAtom at {atom.start} has no ChapterTimeStart",
            container="matroska",
            offset=atom.start,
        )
    if not titles or len(titles) != len(languages):
        raise MalformedChapterError(
            f"ChapterAtom at {atom.start} has {len(titles)} titles and {len(languages)} languages",
            container="matroska",
            offset=atom.start,
        )

    return MediaChapter(
        titles=tuple(titles),
        languages=tuple(languages),
        start_time=start_ns // NANOSECONDS_PER_TICK,
        end_time=None if end_ns is None else end_ns // NANOSECONDS_PER_TICK,
    )
