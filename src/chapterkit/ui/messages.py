"""Simple message printing helpers for chapterkit UI."""

from __future__ import annotations

from rich.markup import escape

from chapterkit.ui.core import console, err_console


def print_success(message: str) -> None:
    """Print a success message with checkmark.

    Example:
        >>> print_success("Wrote 12 chapters")
          ✓ Wrote 12 chapters
    """
    console.print(f"  [success]✓[/] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message with X to stderr.

    Example:
        >>> print_error("No chapters found")
          ✗ No chapters found
    """
    err_console.print(f"  [error]✗[/] {escape(message)}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"  [warning]![/] {escape(message)}")


def print_info(message: str) -> None:
    """Print an info message.

    Example:
        >>> print_info("Base media: movie.mkv")
          → Base media: movie.mkv
    """
    console.print(f"  [info]→[/] {escape(message)}")
