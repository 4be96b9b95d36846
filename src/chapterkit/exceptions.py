"""
chapterkit exception hierarchy.

Provides typed exceptions so that parsers can signal *why* a chapter list could
not be produced. Resolvers turn the format errors below into ``ChapterResult``
values; they never leak partial chapter lists.

Exception Hierarchy:
    ChapterkitError (base)
    ├── ConfigurationError - Config file issues, invalid settings
    ├── ChapterSourceError - Byte source cannot be opened or read (I/O)
    ├── ChapterFormatError - Chapter structure problems
    │   ├── ChapterNotFoundError - Searched structure is absent
    │   └── MalformedChapterError - Structure present but invalid
    │       └── TruncatedReadError - Read past the end of a region
    └── ChapterWriteError - Chapter file could not be written
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


class ChapterkitError(Exception):
    """Base exception for all chapterkit errors."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """
        Initialize chapterkit exception.

        Args:
            message: Human-readable error message
            details: Optional structured error details for logging/debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(ChapterkitError):
    """Configuration file or settings error."""

    def __init__(
        self,
        message: str,
        *,
        config_file: Path | str | None = None,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if config_file:
            details["config_file"] = str(config_file)
        if field:
            details["field"] = field
        super().__init__(message, details=details)
        self.config_file = config_file
        self.field = field


# =============================================================================
# I/O Errors
# =============================================================================


class ChapterSourceError(ChapterkitError):
    """The underlying byte source could not be opened or read."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if path:
            details["path"] = str(path)
        super().__init__(message, details=details)
        self.path = path


# =============================================================================
# Format Errors
# =============================================================================


class ChapterFormatError(ChapterkitError):
    """A chapter structure could not be decoded."""

    def __init__(
        self,
        message: str,
        *,
        container: str | None = None,
        offset: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if container:
            details["container"] = container
        if offset is not None:
            details["offset"] = offset
        super().__init__(message, details=details)
        self.container = container
        self.offset = offset


class ChapterNotFoundError(ChapterFormatError):
    """The searched box, element or grammar is absent."""

    pass


class MalformedChapterError(ChapterFormatError):
    """A structure is present but violates the expected shape."""

    pass


class TruncatedReadError(MalformedChapterError):
    """A read ran past the end of the stream or an allocated region."""

    def __init__(
        self,
        message: str,
        *,
        requested: int | None = None,
        available: int | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.get("details", {})
        if requested is not None:
            details["requested"] = requested
        if available is not None:
            details["available"] = available
        kwargs["details"] = details
        super().__init__(message, **kwargs)
        self.requested = requested
        self.available = available


# =============================================================================
# Write Errors
# =============================================================================


class ChapterWriteError(ChapterkitError):
    """Chapter file write failure."""

    def __init__(
        self,
        message: str,
        *,
        output_path: Path | str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if output_path:
            details["output_path"] = str(output_path)
        super().__init__(message, details=details)
        self.output_path = output_path
