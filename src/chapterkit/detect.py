"""Container detection from the first bytes of a file."""

from __future__ import annotations

import logging
from pathlib import Path

from chapterkit.cursor import ByteCursor
from chapterkit.ebml.ids import EBML_HEADER
from chapterkit.iso.boxes import ROOT_ATOM_TYPES
from chapterkit.models import ContainerFamily
from chapterkit.settings import get_settings

logger = logging.getLogger(__name__)

SNIFF_SIZE = 8


def sniff_bytes(head: bytes) -> ContainerFamily:
    """
    Classify a file from its first 8 bytes.

    ISO files start with a box whose type (bytes 4-8) is a known root box;
    Matroska files start with the EBML magic.
    """
    if len(head) >= 4 and head[:4] == EBML_HEADER:
        return ContainerFamily.MATROSKA
    if len(head) >= SNIFF_SIZE and head[4:8] in ROOT_ATOM_TYPES:
        return ContainerFamily.ISO
    return ContainerFamily.UNKNOWN


def sniff_container(cursor: ByteCursor) -> ContainerFamily:
    """Classify the stream behind ``cursor`` without moving it."""
    start = cursor.position
    cursor.seek(0)
    family = sniff_bytes(cursor.peek(SNIFF_SIZE))
    cursor.seek(start)
    logger.debug("Sniffed %s as %s", cursor.name, family.value)
    return family


def is_chapter_file(path: Path | str) -> bool:
    """True if the path carries the chapter file extension."""
    return Path(path).suffix.lower() == get_settings().chapter_file_extension
