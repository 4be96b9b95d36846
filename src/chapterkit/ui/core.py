"""Core console configuration and theme for chapterkit UI.

This module provides the Rich console instances and theme that the other UI
modules build upon.
"""

from __future__ import annotations

from rich.console import Console
from rich.theme import Theme

# =============================================================================
# Theme Configuration
# =============================================================================

CHAPTERKIT_THEME = Theme(
    {
        # Status colors
        "info": "cyan",
        "success": "green",
        "warning": "yellow",
        "error": "red bold",
        # Text styles
        "title": "bold white",
        "dim": "dim",
        "highlight": "bold magenta",
        # Chapter table styles
        "path": "cyan",
        "timecode": "green",
        "language": "yellow",
        "hint": "dim italic",
    }
)

# =============================================================================
# Console Instances
# =============================================================================

# Primary console for normal output
console = Console(theme=CHAPTERKIT_THEME, stderr=False)

# Error console for stderr output
err_console = Console(theme=CHAPTERKIT_THEME, stderr=True)
