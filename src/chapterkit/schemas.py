"""Pydantic schemas for JSON chapter output.

Example:
    {
        "source": "matroska",
        "chapters": [
            {
                "index": 1,
                "titles": ["Intro"],
                "languages": ["eng"],
                "start": "0:00:00",
                "end": "0:01:30",
                "start_ticks": 0,
                "end_ticks": 900000000
            }
        ]
    }
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from chapterkit.models import ChapterResult, MediaChapter
from chapterkit.timecodes import format_duration


class ChapterSchema(BaseModel):
    """One chapter in JSON output."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=1, description="1-based position in the list")
    titles: list[str] = Field(min_length=1)
    languages: list[str] = Field(min_length=1)
    start: str = Field(description="Start as H:MM:SS[.fffffff]")
    end: str | None = Field(default=None, description="End, or null when open-ended")
    start_ticks: int = Field(ge=0, description="Start in 100 ns ticks")
    end_ticks: int | None = Field(default=None, ge=0)

    @classmethod
    def from_chapter(cls, chapter: MediaChapter, index: int) -> ChapterSchema:
        return cls(
            index=index,
            titles=list(chapter.titles),
            languages=list(chapter.languages),
            start=format_duration(chapter.start_time),
            end=None if chapter.end_time is None else format_duration(chapter.end_time),
            start_ticks=chapter.start_time,
            end_ticks=chapter.end_time,
        )

    def to_chapter(self) -> MediaChapter:
        return MediaChapter(
            titles=tuple(self.titles),
            languages=tuple(self.languages),
            start_time=self.start_ticks,
            end_time=self.end_ticks,
        )


class ChapterListSchema(BaseModel):
    """Chapter list in JSON output."""

    source: str | None = None
    chapters: list[ChapterSchema] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: ChapterResult) -> ChapterListSchema:
        return cls(
            source=result.source.value if result.source else None,
            chapters=[
                ChapterSchema.from_chapter(chapter, index)
                for index, chapter in enumerate(result.chapters, 1)
            ],
        )
