"""Core commands: show, export, check."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer

from chapterkit.cli._app import FILE_COMMANDS, READ_COMMANDS, LanguageOpt

logger = logging.getLogger(__name__)


def register_core_commands(app: typer.Typer) -> None:
    """Register core commands on the main app."""

    @app.command("show", rich_help_panel=READ_COMMANDS)
    def show(
        path: Annotated[
            Path,
            typer.Argument(
                help="Media file (mp4, m4b, mov, mkv, webm) or .chap file.",
                exists=True,
                dir_okay=False,
            ),
        ],
        as_json: Annotated[
            bool,
            typer.Option("--json", help="Print chapters as JSON."),
        ] = False,
        lang: LanguageOpt = 0,
    ) -> None:
        """📖 List the chapters of a media or chapter file.

        [bold]Examples:[/]
          chapterkit show movie.mkv
          chapterkit show movie.mkv --lang 1
          chapterkit show book.m4b --json
        """
        from chapterkit.engine import resolve_any
        from chapterkit.schemas import ChapterListSchema
        from chapterkit.ui import console, print_chapter_table, print_error

        result = resolve_any(path)
        if as_json:
            typer.echo(ChapterListSchema.from_result(result).model_dump_json(indent=2))
            raise typer.Exit(0 if result.ok else 1)

        if not result.ok:
            print_error(f"No chapters in {path.name}: {result.reason}")
            raise typer.Exit(1)

        source = result.source.value if result.source else "unknown"
        print_chapter_table(list(result.chapters), f"Chapters ({source})", lang)
        console.print(f"[dim]{len(result.chapters)} chapters from {path}[/]")

    @app.command("export", rich_help_panel=FILE_COMMANDS)
    def export(
        path: Annotated[
            Path,
            typer.Argument(help="Media file to read chapters from.", exists=True, dir_okay=False),
        ],
        output: Annotated[
            Path | None,
            typer.Argument(help="Output path (default: next to the media file)."),
        ] = None,
        lang: LanguageOpt = 0,
    ) -> None:
        """💾 Write the chapters of a media file to a .chap file.

        The extension is always normalized to [cyan].chap[/] and an existing
        file is overwritten.

        [bold]Examples:[/]
          chapterkit export movie.mkv
          chapterkit export movie.mkv chapters/movie --lang 1
        """
        from chapterkit.chapfile import write_chapter_file
        from chapterkit.engine import resolve_chapters
        from chapterkit.exceptions import ChapterWriteError
        from chapterkit.ui import print_error, print_success

        result = resolve_chapters(path)
        if not result.ok:
            print_error(f"No chapters in {path.name}: {result.reason}")
            raise typer.Exit(1)

        try:
            written = write_chapter_file(output or path, list(result.chapters), lang)
        except ChapterWriteError as e:
            print_error(str(e))
            raise typer.Exit(1) from e

        print_success(f"Wrote {len(result.chapters)} chapters to {written}")

    @app.command("check", rich_help_panel=FILE_COMMANDS)
    def check(
        path: Annotated[
            Path,
            typer.Argument(help="Chapter file to validate.", exists=True, dir_okay=False),
        ],
    ) -> None:
        """✅ Validate a .chap file and locate its media file.

        [bold]Examples:[/]
          chapterkit check movie.chap
        """
        from chapterkit.chapfile import find_base_media_file, resolve_chapter_file
        from chapterkit.ui import print_error, print_info, print_success, print_warning

        result = resolve_chapter_file(path)
        if not result.ok:
            print_error(f"{path.name} is not a valid chapter file: {result.reason}")
            raise typer.Exit(1)

        print_success(f"{path.name}: {len(result.chapters)} chapters")
        media = find_base_media_file(path)
        if media is None:
            print_warning("No matching media file found")
        else:
            print_info(f"Base media: {media}")
