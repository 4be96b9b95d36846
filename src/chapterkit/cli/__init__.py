"""chapterkit CLI - command-line interface built with Typer and Rich.

Commands:
- show: list chapters of a media or .chap file
- export: write a media file's chapters to a .chap file
- check: validate a .chap file and find its media file
"""

from __future__ import annotations

import sys

from chapterkit.cli._app import (
    FILE_COMMANDS,
    READ_COMMANDS,
    LanguageOpt,
    create_main_callback,
    make_app,
    validate_language_callback,
)

app = make_app()

# Register main callback (handles --version, --verbose, --config)
create_main_callback(app)

from chapterkit.cli.core import register_core_commands  # noqa: E402

register_core_commands(app)


# =============================================================================
# Entry Point
# =============================================================================


def main() -> int:
    """Main entry point for the CLI."""
    try:
        app()
        return 0
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 0


__all__ = [
    "FILE_COMMANDS",
    "READ_COMMANDS",
    "LanguageOpt",
    "app",
    "main",
    "validate_language_callback",
]

if __name__ == "__main__":
    sys.exit(main())
