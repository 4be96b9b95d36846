"""
QuickTime chapter track resolver.

A QuickTime/MP4 chapter list is a text track referenced from another track:

    moov/trak/tref/chap        -> referenced track ID
    moov/trak[N]/mdia          -> time scale (mdhd, 20 bytes into mdia payload)
    moov/trak[N]/mdia/minf/stbl/stts -> sample durations (chapter starts)
    moov/trak[N]/mdia/minf/stbl/stco -> sample offsets (chapter titles)

Each title sample is ``[length:u16][utf-8 text]``.
"""

from __future__ import annotations

import logging

from chapterkit.exceptions import ChapterNotFoundError, MalformedChapterError
from chapterkit.iso.boxes import Box, BoxScanner
from chapterkit.models import TICKS_PER_SECOND, MediaChapter, fill_end_times

logger = logging.getLogger(__name__)

# Offset of the time scale inside mdia's payload: mdhd header (8) +
# version/flags (4) + creation time (4) + modification time (4)
MDIA_TIME_SCALE_OFFSET = 20

_TABLE_HEADER_SIZE = 8  # version/flags + entry count
_STTS_ENTRY_SIZE = 8
_STCO_ENTRY_SIZE = 4


def read_quicktime_chapters(scanner: BoxScanner, moov: Box) -> list[MediaChapter]:
    """
    Decode the chapter text track referenced from ``moov``.

    The scanner must currently be inside ``moov``; it is returned to the same
    depth on every exit path.

    Args:
        scanner: Scanner descended into ``moov``
        moov: The movie box

    Returns:
        Chapters with end times forward-filled

    Raises:
        ChapterNotFoundError: No chapter reference or chapter track boxes
        MalformedChapterError: Tables are inconsistent or truncated
    """
    track_number, referring = _find_chapter_reference(scanner, moov)
    logger.debug("Chapter reference in trak #%d points to track %d", referring[0], track_number)

    _seek_chapter_trak(scanner, moov, track_number, referring)
    with scanner.child(b"trak") as trak:
        if trak is None:
            raise ChapterNotFoundError(
                f"Chapter track {track_number} not present in moov", container="quicktime"
            )
        start_times, titles = _read_chapter_trak(scanner)

    chapters = [
        MediaChapter.single(title, start_time) for start_time, title in zip(start_times, titles)
    ]
    return fill_end_times(chapters)


def _find_chapter_reference(scanner: BoxScanner, moov: Box) -> tuple[int, tuple[int, int]]:
    """
    Walk the trak children of moov looking for ``tref/chap``.

    Returns:
        ``(track_number, (track_counter, trak_start))`` where ``track_counter``
        is the 1-based index of the referring trak
    """
    scanner.rewind(moov.content_start)
    track_counter = 0
    while True:
        with scanner.child(b"trak") as trak:
            if trak is None:
                raise ChapterNotFoundError("No trak carries a chapter reference", container="quicktime")
            track_counter += 1
            with scanner.child(b"tref") as tref:
                if tref is None:
                    continue
                with scanner.child(b"chap") as chap:
                    if chap is None:
                        continue
                    if chap.content_size < 4:
                        raise MalformedChapterError(
                            f"chap box at {chap.start} is too small for a track ID",
                            container="quicktime",
                            offset=chap.start,
                        )
                    scanner.cursor.seek(chap.content_start)
                    return scanner.cursor.read_u32(), (track_counter, trak.start)


def _seek_chapter_trak(
    scanner: BoxScanner, moov: Box, track_number: int, referring: tuple[int, int]
) -> None:
    """
    Position the scanner so that the next ``trak`` found is the chapter track.

    The referenced track ID is resolved positionally: ``delta = track_number -
    track_counter`` further trak siblings after the referring one, or, when
    that is negative, the ``track_number``-th trak counted from the start.
    """
    track_counter, referring_start = referring
    if track_number == 0:
        raise MalformedChapterError("Chapter reference names track 0", container="quicktime")

    delta = track_number - track_counter
    if delta < 0:
        scanner.rewind(moov.content_start)
        to_skip = track_number - 1
    elif delta == 0:
        scanner.rewind(referring_start)
        to_skip = 0
    else:
        # Scanner already sits just past the referring trak
        to_skip = delta - 1

    for _ in range(to_skip):
        with scanner.child(b"trak") as trak:
            if trak is None:
                raise ChapterNotFoundError(
                    f"Chapter track {track_number} not present in moov", container="quicktime"
                )


def _read_chapter_trak(scanner: BoxScanner) -> tuple[list[int], list[str]]:
    """Read start times and titles from the chapter trak the scanner is inside."""
    with scanner.child(b"mdia") as mdia:
        if mdia is None:
            raise ChapterNotFoundError("Chapter track has no mdia box", container="quicktime")
        time_scale = scanner.read_payload_u32(MDIA_TIME_SCALE_OFFSET) or 1

        with scanner.child(b"minf") as minf:
            if minf is None:
                raise ChapterNotFoundError("Chapter track has no minf box", container="quicktime")
            with scanner.child(b"stbl") as stbl:
                if stbl is None:
                    raise ChapterNotFoundError(
                        "Chapter track has no stbl box", container="quicktime"
                    )
                title_count = _title_count(scanner)
                scanner.rewind(stbl.content_start)
                start_times = _read_start_times(scanner, time_scale, title_count)
                scanner.rewind(stbl.content_start)
                titles = _read_titles(scanner, len(start_times))

    return start_times, titles


def _table_entry_count(scanner: BoxScanner, box: Box, entry_size: int) -> int:
    """Read a sample table header and check that its entries fit inside the box."""
    if box.content_size < _TABLE_HEADER_SIZE:
        raise MalformedChapterError(
            f"{box.tag.decode('latin-1')} box at {box.start} is too small",
            container="quicktime",
            offset=box.start,
        )
    cursor = scanner.cursor
    cursor.seek(box.content_start)
    cursor.skip(4)  # version + flags
    entry_count = cursor.read_u32()
    if _TABLE_HEADER_SIZE + entry_count * entry_size > box.content_size:
        raise MalformedChapterError(
            f"{box.tag.decode('latin-1')} declares {entry_count} entries, more than fit in the box",
            container="quicktime",
            offset=box.start,
        )
    return entry_count


def _title_count(scanner: BoxScanner) -> int:
    """Number of title offsets in stco; bounded by the box size."""
    with scanner.child(b"stco") as stco:
        if stco is None:
            raise ChapterNotFoundError("Chapter track has no stco box", container="quicktime")
        return _table_entry_count(scanner, stco, _STCO_ENTRY_SIZE)


def _read_start_times(scanner: BoxScanner, time_scale: int, max_chapters: int) -> list[int]:
    """
    Derive chapter start times from the time-to-sample table.

    The first entry is a placeholder: chapter 0 always starts at 0. Every later
    entry adds ``sample_count`` chapters, each ``sample_duration`` units after
    the previous one. Expansion stops with an error as soon as it would yield
    more than ``max_chapters`` (one per stco title offset).
    """
    with scanner.child(b"stts") as stts:
        if stts is None:
            raise ChapterNotFoundError("Chapter track has no stts box", container="quicktime")
        entry_count = _table_entry_count(scanner, stts, _STTS_ENTRY_SIZE)
        if entry_count == 0:
            raise ChapterNotFoundError("Chapter track stts is empty", container="quicktime")

        cursor = scanner.cursor
        cursor.skip(_STTS_ENTRY_SIZE)  # placeholder entry
        start_times = [0]
        elapsed = 0
        for _ in range(entry_count - 1):
            sample_count = cursor.read_u32()
            sample_duration = cursor.read_u32()
            if sample_count > max_chapters - len(start_times):
                raise MalformedChapterError(
                    f"stts yields more chapters than the {max_chapters} titles in stco",
                    container="quicktime",
                    offset=stts.start,
                )
            for _ in range(sample_count):
                elapsed += sample_duration
                start_times.append(elapsed * TICKS_PER_SECOND // time_scale)

    return start_times


def _read_titles(scanner: BoxScanner, chapter_count: int) -> list[str]:
    """Read one title per chunk offset listed in stco."""
    with scanner.child(b"stco") as stco:
        if stco is None:
            raise ChapterNotFoundError("Chapter track has no stco box", container="quicktime")
        entry_count = _table_entry_count(scanner, stco, _STCO_ENTRY_SIZE)
        if entry_count != chapter_count:
            raise MalformedChapterError(
                f"stco lists {entry_count} titles but stts yields {chapter_count} chapters",
                container="quicktime",
                offset=stco.start,
            )

        cursor = scanner.cursor
        offsets = [cursor.read_u32() for _ in range(entry_count)]

    titles: list[str] = []
    for offset in offsets:
        cursor.seek(offset)
        length = cursor.read_u16()
        titles.append(cursor.read_utf8(length))
    return titles
