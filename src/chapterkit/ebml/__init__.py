"""
Matroska/EBML chapter resolution.

Provides the EBML element reader and the SeekHead-driven chapter resolver.
"""

from __future__ import annotations

from chapterkit.ebml.matroska import read_matroska_chapters, resolve_matroska_chapters
from chapterkit.ebml.reader import (
    EbmlReader,
    Element,
    encode_data_size,
    encode_element_id,
    unknown_size,
    vint_length,
)

__all__ = [
    "EbmlReader",
    "Element",
    "encode_data_size",
    "encode_element_id",
    "read_matroska_chapters",
    "resolve_matroska_chapters",
    "unknown_size",
    "vint_length",
]
