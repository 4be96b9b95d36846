"""chapterkit UI - Rich console output components.

Modules:
    core: Console instances and theme
    messages: Simple print helpers (success, error, warning, info)
    tables: Chapter table rendering

Usage:
    from chapterkit.ui import console, print_success, print_chapter_table
"""

from __future__ import annotations

from chapterkit.ui.core import CHAPTERKIT_THEME, console, err_console
from chapterkit.ui.messages import print_error, print_info, print_success, print_warning
from chapterkit.ui.tables import build_chapter_table, print_chapter_table

__all__ = [
    "CHAPTERKIT_THEME",
    "build_chapter_table",
    "console",
    "err_console",
    "print_chapter_table",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
