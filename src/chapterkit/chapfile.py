"""
Plain-text ``.chap`` chapter files.

One chapter per line, blank lines and ``#`` comments ignored:

    # comment
    0:00:00 - 0:01:30 Intro
    0:01:30 Main feature
    1:45:00.25 9

Grammar: ``<start>[<ws>-<ws>][<end>]<ws><title>``. Times use ``H:MM:SS`` with
an optional fraction (see ``chapterkit.timecodes``). A title made of a single
digit marks a chapter without a title and is stored as ``"#"``. Missing end
times are forward-filled from the next chapter's start.

Writing then reading is lossless for times and ordinary titles, except:
    - only one title per chapter is written; languages read back as ""
    - a title that is a single digit reads back as ``"#"``
    - on a line without an end time, a title whose first word is a duration
      is read as that end time (``"1:00:00 Finale"`` -> end 1 h, "Finale")
    - whitespace runs inside a title are collapsed to one space

Key functions:
    - resolve_chapter_file(): Parse a file into a ChapterResult
    - read_chapter_file(): Same, returning a list or None
    - write_chapter_file(): Serialize chapters to a .chap file
    - find_base_media_file(): Locate the media file a .chap file belongs to
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from pathlib import Path

from chapterkit.exceptions import (
    ChapterNotFoundError,
    ChapterWriteError,
    MalformedChapterError,
)
from chapterkit.models import ChapterResult, ChapterSource, MediaChapter, fill_end_times
from chapterkit.settings import get_settings
from chapterkit.timecodes import format_duration, parse_duration

logger = logging.getLogger(__name__)

NO_TITLE = "#"
COMMENT_PREFIX = "#"
FILE_HEADER = "# chapterkit chapter file"

_SINGLE_DIGIT = re.compile(r"^\d$")


# =============================================================================
# Parsing
# =============================================================================


def parse_chapter_line(line: str, line_number: int = 0) -> MediaChapter:
    """
    Parse one chapter line.

    Args:
        line: Line text without the newline (not blank, not a comment)
        line_number: 1-based line number for error messages

    Returns:
        Chapter with ``end_time`` set only when the line gives one

    Raises:
        MalformedChapterError: If the start time or the title is missing/invalid
    """
    parts = line.strip().split(maxsplit=1)
    if not parts:
        raise MalformedChapterError(f"Line {line_number}: empty chapter line", container="chap")

    start = parse_duration(parts[0])
    if start is None:
        raise MalformedChapterError(
            f"Line {line_number}: invalid start time {parts[0]!r}", container="chap"
        )

    rest = parts[1] if len(parts) > 1 else ""
    if rest == "-" or rest.startswith(("- ", "-\t")):
        rest = rest[1:].lstrip()

    end: int | None = None
    tokens = rest.split(maxsplit=1)
    if tokens:
        end = parse_duration(tokens[0])
        if end is not None:
            rest = tokens[1] if len(tokens) > 1 else ""

    title = rest.strip()
    if not title:
        raise MalformedChapterError(f"Line {line_number}: missing chapter title", container="chap")
    if _SINGLE_DIGIT.match(title):
        title = NO_TITLE

    return MediaChapter.single(title, start, end)


def parse_chapter_text(text: str) -> list[MediaChapter]:
    """
    Parse the full contents of a chapter file.

    Any invalid line invalidates the whole text.

    Raises:
        ChapterNotFoundError: No chapter lines
        MalformedChapterError: An invalid line
    """
    chapters: list[MediaChapter] = []
    for line_number, line in enumerate(text.splitlines(), 1):
        stripped = line.strip()
        if not stripped or stripped.startswith(COMMENT_PREFIX):
            continue
        chapters.append(parse_chapter_line(stripped, line_number))

    if not chapters:
        raise ChapterNotFoundError("Chapter file contains no chapters", container="chap")
    return fill_end_times(chapters)


def _decode(raw: bytes) -> str:
    """Decode as UTF-8 (BOM tolerated), falling back to Latin-1."""
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.debug("Chapter file is not UTF-8, decoding as Latin-1")
        return raw.decode("latin-1")


def resolve_chapter_file(path: Path | str, *, max_bytes: int | None = None) -> ChapterResult:
    """
    Parse a chapter file.

    Files at or above ``max_bytes`` (default from settings, 10 KB) are
    rejected before reading.

    Args:
        path: Chapter file path
        max_bytes: Size limit override

    Returns:
        ChapterResult with every chapter, or the failure reason
    """
    file_path = Path(path)
    limit = max_bytes if max_bytes is not None else get_settings().chapter_file_max_bytes

    try:
        size = file_path.stat().st_size
        if size >= limit:
            logger.debug("Chapter file %s too large (%d >= %d bytes)", file_path, size, limit)
            return ChapterResult.malformed(
                f"Chapter file is {size} bytes, limit is {limit}", ChapterSource.CHAPTER_FILE
            )
        raw = file_path.read_bytes()
    except OSError as e:
        logger.debug("Cannot read chapter file %s: %s", file_path, e)
        return ChapterResult.io_error(f"Cannot read {file_path}: {e}")

    try:
        chapters = parse_chapter_text(_decode(raw))
    except ChapterNotFoundError as e:
        return ChapterResult.not_found(str(e), ChapterSource.CHAPTER_FILE)
    except MalformedChapterError as e:
        logger.debug("Invalid chapter file %s: %s", file_path, e)
        return ChapterResult.malformed(str(e), ChapterSource.CHAPTER_FILE)

    logger.debug("Read %d chapters from %s", len(chapters), file_path)
    return ChapterResult.found(chapters, ChapterSource.CHAPTER_FILE)


def read_chapter_file(path: Path | str) -> list[MediaChapter] | None:
    """Chapters from a chapter file, or None if it is missing or invalid."""
    return resolve_chapter_file(path).to_list()


# =============================================================================
# Writing
# =============================================================================


def format_chapter_line(chapter: MediaChapter, language_index: int = 0) -> str:
    """Render one chapter as a chapter-file line."""
    title = " ".join(chapter.title_for(language_index).split()) or NO_TITLE
    start = format_duration(chapter.start_time)
    if chapter.end_time is None:
        return f"{start} {title}"
    return f"{start} - {format_duration(chapter.end_time)} {title}"


def format_chapter_text(chapters: Iterable[MediaChapter], language_index: int = 0) -> str:
    """Render chapters as chapter-file text (header comment included)."""
    lines = [FILE_HEADER]
    lines.extend(format_chapter_line(chapter, language_index) for chapter in chapters)
    return "\n".join(lines) + "\n"


def chapter_file_path(path: Path | str) -> Path:
    """Normalize a path to the chapter file extension."""
    return Path(path).with_suffix(get_settings().chapter_file_extension)


def write_chapter_file(
    path: Path | str,
    chapters: Sequence[MediaChapter],
    language_index: int = 0,
) -> Path:
    """
    Write chapters to a chapter file, replacing any existing file.

    Args:
        path: Target path; the extension is normalized to ``.chap``
        chapters: Chapters to write (at least one)
        language_index: Which title variant to write per chapter

    Returns:
        Path actually written

    Raises:
        ChapterWriteError: If there is nothing to write or the write fails
    """
    output_path = chapter_file_path(path)
    if not chapters:
        raise ChapterWriteError("No chapters to write", output_path=output_path)
    if language_index < 0:
        raise ChapterWriteError(
            f"Invalid language index {language_index}", output_path=output_path
        )

    text = format_chapter_text(chapters, language_index)
    try:
        output_path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise ChapterWriteError(f"Cannot write {output_path}: {e}", output_path=output_path) from e

    logger.info("Wrote %d chapters to %s", len(chapters), output_path)
    return output_path


# =============================================================================
# Base Media Lookup
# =============================================================================


def find_base_media_file(
    chapter_file: Path | str,
    ignored_extensions: Iterable[str] | None = None,
) -> Path | None:
    """
    Find the media file a chapter file belongs to.

    Searches the chapter file's directory, then its parent, for a file with the
    same stem (case-insensitive) and a different, non-ignored extension.

    Args:
        chapter_file: Path of the .chap file
        ignored_extensions: Extensions never considered media (default from settings)

    Returns:
        First match in name order, or None
    """
    chapter_path = Path(chapter_file)
    if ignored_extensions is None:
        ignored_extensions = get_settings().ignored_extensions
    ignored = {ext.lower() for ext in ignored_extensions}
    ignored.add(chapter_path.suffix.lower())
    stem = chapter_path.stem.casefold()

    directories = [chapter_path.parent]
    if chapter_path.parent.parent != chapter_path.parent:
        directories.append(chapter_path.parent.parent)

    for directory in directories:
        try:
            candidates = sorted(directory.iterdir())
        except OSError as e:
            logger.debug("Cannot list %s: %s", directory, e)
            continue
        for candidate in candidates:
            if (
                candidate.suffix
                and candidate.suffix.lower() not in ignored
                and candidate.stem.casefold() == stem
                and candidate.is_file()
            ):
                return candidate
    return None
