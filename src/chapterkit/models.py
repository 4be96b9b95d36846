"""Data models for chapterkit."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum

# 100 ns ticks: the unit every MediaChapter time is expressed in
TICKS_PER_SECOND = 10_000_000
TICKS_PER_MILLISECOND = 10_000
NANOSECONDS_PER_TICK = 100


class ContainerFamily(Enum):
    """Container family detected from the first bytes of a file."""

    ISO = "iso"  # ISO base media / QuickTime (mp4, m4a, m4b, mov)
    MATROSKA = "matroska"  # EBML (mkv, mka, webm)
    UNKNOWN = "unknown"


class ChapterSource(Enum):
    """Which grammar produced a chapter list."""

    QUICKTIME = "quicktime"  # Chapter text track (tref/chap)
    NERO = "nero"  # moov/udta/chpl
    MATROSKA = "matroska"  # Chapters/EditionEntry/ChapterAtom
    CHAPTER_FILE = "chapter_file"


class ParseStatus(Enum):
    """Outcome of a single resolver call."""

    FOUND = "found"
    NOT_FOUND = "not_found"  # Structure absent
    MALFORMED = "malformed"  # Structure present but invalid
    IO_ERROR = "io_error"  # Byte source could not be opened or read


@dataclass(frozen=True)
class MediaChapter:
    """
    One chapter marker.

    Times are integer 100 ns ticks from the natural start of the media.
    ``end_time`` of ``None`` means the chapter runs to the next chapter's start,
    or to the end of the media for the last chapter.

    Attributes:
        titles: One title per language variant (never empty)
        languages: ISO 639-2 style codes parallel to ``titles`` ("" if unknown)
        start_time: Start offset in ticks
        end_time: End offset in ticks, or None when open-ended
    """

    titles: tuple[str, ...]
    languages: tuple[str, ...] = ("",)
    start_time: int = 0
    end_time: int | None = None

    def __post_init__(self) -> None:
        """Normalize sequences to tuples and enforce the parallel-array invariant."""
        object.__setattr__(self, "titles", tuple(self.titles))
        object.__setattr__(self, "languages", tuple(self.languages))
        if not self.titles:
            raise ValueError("MediaChapter requires at least one title")
        if len(self.titles) != len(self.languages):
            raise ValueError(
                f"titles/languages length mismatch: {len(self.titles)} != {len(self.languages)}"
            )
        if self.start_time < 0:
            raise ValueError(f"start_time must be >= 0, got: {self.start_time}")
        if self.end_time is not None and self.end_time < 0:
            raise ValueError(f"end_time must be >= 0, got: {self.end_time}")

    @classmethod
    def single(
        cls,
        title: str,
        start_time: int,
        end_time: int | None = None,
        language: str = "",
    ) -> MediaChapter:
        """Create a chapter with a single title/language pair."""
        return cls(titles=(title,), languages=(language,), start_time=start_time, end_time=end_time)

    @property
    def title(self) -> str:
        """First (default language) title."""
        return self.titles[0]

    @property
    def start_seconds(self) -> float:
        return self.start_time / TICKS_PER_SECOND

    @property
    def end_seconds(self) -> float | None:
        if self.end_time is None:
            return None
        return self.end_time / TICKS_PER_SECOND

    def title_for(self, language_index: int = 0) -> str:
        """
        Get the title for a language index.

        Falls back to the first title when the chapter has fewer variants.

        Args:
            language_index: Index into ``titles`` (0 = first variant)

        Returns:
            Selected title
        """
        if language_index < 0:
            raise ValueError(f"language_index must be >= 0, got: {language_index}")
        if language_index < len(self.titles):
            return self.titles[language_index]
        return self.titles[0]

    def duration_ticks(self, next_start: int | None = None) -> int | None:
        """Length of the chapter in ticks, or None if it cannot be known."""
        end = self.end_time if self.end_time is not None else next_start
        if end is None:
            return None
        return max(end - self.start_time, 0)


def fill_end_times(chapters: Sequence[MediaChapter]) -> list[MediaChapter]:
    """
    Forward-fill missing end times.

    Every chapter except the last whose ``end_time`` is None receives the next
    chapter's ``start_time``. The last chapter keeps its value. The input is
    not modified.

    Args:
        chapters: Chapters in declaration order

    Returns:
        New list with end times filled
    """
    filled: list[MediaChapter] = []
    for index, chapter in enumerate(chapters):
        if chapter.end_time is None and index + 1 < len(chapters):
            chapter = replace(chapter, end_time=chapters[index + 1].start_time)
        filled.append(chapter)
    return filled


@dataclass(frozen=True)
class ChapterResult:
    """
    Result of resolving chapters from one source.

    Either ``status`` is FOUND and ``chapters`` holds the complete list, or
    ``chapters`` is empty and ``reason`` explains the failure. A partially
    decoded list is never stored here.
    """

    status: ParseStatus
    chapters: tuple[MediaChapter, ...] = field(default_factory=tuple)
    reason: str = ""
    source: ChapterSource | None = None

    @classmethod
    def found(cls, chapters: Iterable[MediaChapter], source: ChapterSource) -> ChapterResult:
        return cls(status=ParseStatus.FOUND, chapters=tuple(chapters), source=source)

    @classmethod
    def not_found(cls, reason: str, source: ChapterSource | None = None) -> ChapterResult:
        return cls(status=ParseStatus.NOT_FOUND, reason=reason, source=source)

    @classmethod
    def malformed(cls, reason: str, source: ChapterSource | None = None) -> ChapterResult:
        return cls(status=ParseStatus.MALFORMED, reason=reason, source=source)

    @classmethod
    def io_error(cls, reason: str) -> ChapterResult:
        return cls(status=ParseStatus.IO_ERROR, reason=reason)

    @property
    def ok(self) -> bool:
        return self.status is ParseStatus.FOUND

    def to_list(self) -> list[MediaChapter] | None:
        """Chapters as a list, or None when nothing was found."""
        if not self.ok:
            return None
        return list(self.chapters)
