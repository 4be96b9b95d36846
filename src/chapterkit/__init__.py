"""chapterkit - Chapter marker extraction for MP4/QuickTime, Matroska and .chap files."""

from chapterkit.chapfile import (
    find_base_media_file,
    read_chapter_file,
    resolve_chapter_file,
    write_chapter_file,
)
from chapterkit.engine import read_chapters, resolve_any, resolve_chapters
from chapterkit.exceptions import (
    ChapterFormatError,
    ChapterkitError,
    ChapterNotFoundError,
    ChapterSourceError,
    ChapterWriteError,
    ConfigurationError,
    MalformedChapterError,
    TruncatedReadError,
)
from chapterkit.models import (
    TICKS_PER_SECOND,
    ChapterResult,
    ChapterSource,
    ContainerFamily,
    MediaChapter,
    ParseStatus,
    fill_end_times,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Models
    "TICKS_PER_SECOND",
    "ChapterResult",
    "ChapterSource",
    "ContainerFamily",
    "MediaChapter",
    "ParseStatus",
    "fill_end_times",
    # Media files
    "read_chapters",
    "resolve_any",
    "resolve_chapters",
    # Chapter files
    "find_base_media_file",
    "read_chapter_file",
    "resolve_chapter_file",
    "write_chapter_file",
    # Exceptions
    "ChapterkitError",
    "ConfigurationError",
    "ChapterSourceError",
    "ChapterFormatError",
    "ChapterNotFoundError",
    "MalformedChapterError",
    "TruncatedReadError",
    "ChapterWriteError",
]
