"""Table formatting components for chapterkit UI."""

from __future__ import annotations

from collections.abc import Sequence

from rich.markup import escape
from rich.table import Table

from chapterkit.models import MediaChapter
from chapterkit.timecodes import format_clock
from chapterkit.ui.core import console


def build_chapter_table(
    chapters: Sequence[MediaChapter],
    title: str = "Chapters",
    language_index: int = 0,
) -> Table:
    """Build a table of chapters.

    Example:
        ┏━━━━┳━━━━━━━━━━━━━━┳━━━━━━━━━━━━━━┳━━━━━━┳━━━━━━━━━━┓
        ┃ #  ┃ Start        ┃ End          ┃ Lang ┃ Title    ┃
        ┡━━━━╇━━━━━━━━━━━━━━╇━━━━━━━━━━━━━━╇━━━━━━╇━━━━━━━━━━┩
        │ 1  │ 00:00:00.000 │ 00:01:30.000 │ eng  │ Intro    │
        └────┴──────────────┴──────────────┴──────┴──────────┘
    """
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("#", style="dim", width=4)
    table.add_column("Start", style="timecode")
    table.add_column("End", style="timecode")
    table.add_column("Lang", style="language")
    table.add_column("Title")

    for i, chapter in enumerate(chapters, 1):
        index = language_index if language_index < len(chapter.titles) else 0
        table.add_row(
            str(i),
            format_clock(chapter.start_time),
            format_clock(chapter.end_time),
            chapter.languages[index] or "-",
            escape(chapter.titles[index]),
        )
    return table


def print_chapter_table(
    chapters: Sequence[MediaChapter],
    title: str = "Chapters",
    language_index: int = 0,
) -> None:
    """Print a table of chapters, or a dim note when there are none."""
    if not chapters:
        console.print(f"[dim]No {title.lower()} found[/]")
        return
    console.print(build_chapter_table(chapters, title, language_index))
