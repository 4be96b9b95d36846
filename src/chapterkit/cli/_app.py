"""App configuration, callbacks, and shared types for CLI.

This module contains the Typer application factory, the main callback and
type aliases shared by the commands.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer

from chapterkit.exceptions import ConfigurationError
from chapterkit.ui import console, print_error

logger = logging.getLogger(__name__)

# =============================================================================
# Help Panel Names
# =============================================================================

READ_COMMANDS = "Read Chapters"
FILE_COMMANDS = "Chapter Files"


# =============================================================================
# Version Callback
# =============================================================================


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from chapterkit import __version__

        console.print(f"chapterkit [bold]{__version__}[/]")
        raise typer.Exit()


# =============================================================================
# Shared Options
# =============================================================================


def validate_language_callback(value: int) -> int:
    """Reject negative language indexes."""
    if value < 0:
        raise typer.BadParameter("Language index must be 0 or greater")
    return value


LanguageOpt = Annotated[
    int,
    typer.Option(
        "--lang",
        "-l",
        callback=validate_language_callback,
        help="Title variant to use (0 = first language).",
    ),
]


# =============================================================================
# App Factory
# =============================================================================


MAIN_EPILOG = """
[bold cyan]Examples:[/]
  chapterkit show movie.mkv              [dim]# List chapters[/]
  chapterkit show book.m4b --json        [dim]# Chapters as JSON[/]
  chapterkit export movie.mp4            [dim]# Write movie.chap[/]
  chapterkit check movie.chap            [dim]# Validate a chapter file[/]
"""


def make_app() -> typer.Typer:
    """Create and configure the main Typer application."""
    return typer.Typer(
        name="chapterkit",
        help="Read chapter markers from MP4/QuickTime, Matroska and .chap files",
        epilog=MAIN_EPILOG,
        rich_markup_mode="rich",
        pretty_exceptions_enable=True,
        pretty_exceptions_show_locals=False,
        no_args_is_help=True,
        add_completion=False,
        context_settings={"help_option_names": ["-h", "--help"]},
    )


# =============================================================================
# Logging Setup Helper
# =============================================================================


def setup_logging(verbose: bool, config_path: Path | None) -> None:
    """Configure logging based on options."""
    from chapterkit.logging_setup import setup_logging as _setup_logging
    from chapterkit.settings import reload_settings

    try:
        settings = reload_settings(config_file=config_path)
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(2) from e

    _setup_logging(settings, verbose=verbose)


# =============================================================================
# Main Callback Factory
# =============================================================================


def create_main_callback(app: typer.Typer) -> None:
    """Register the main callback on the app."""

    @app.callback(invoke_without_command=True)
    def main_callback(
        ctx: typer.Context,
        version: Annotated[
            bool,
            typer.Option(
                "--version",
                "-V",
                callback=version_callback,
                is_eager=True,
                help="Show version and exit.",
            ),
        ] = False,
        verbose: Annotated[
            bool,
            typer.Option(
                "--verbose",
                "-v",
                help="Enable verbose (DEBUG) logging.",
            ),
        ] = False,
        config: Annotated[
            Path | None,
            typer.Option(
                "--config",
                "-c",
                help="Path to a YAML config file.",
                exists=False,
            ),
        ] = None,
    ) -> None:
        """Chapter marker extraction for media files.

        Reads QuickTime chapter tracks, Nero chpl lists, Matroska chapters
        and plain-text [cyan].chap[/] files.
        """
        ctx.ensure_object(dict)
        ctx.obj["verbose"] = verbose
        ctx.obj["config"] = config

        setup_logging(verbose, config)
