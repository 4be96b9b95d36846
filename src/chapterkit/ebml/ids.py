"""Raw EBML/Matroska element IDs (length-marker bits included)."""

from __future__ import annotations

EBML_HEADER = b"\x1a\x45\xdf\xa3"
SEGMENT = b"\x18\x53\x80\x67"

SEEK_HEAD = b"\x11\x4d\x9b\x74"
SEEK = b"\x4d\xbb"
SEEK_ID = b"\x53\xab"
SEEK_POSITION = b"\x53\xac"

CHAPTERS = b"\x10\x43\xa7\x70"
EDITION_ENTRY = b"\x45\xb9"
CHAPTER_ATOM = b"\xb6"
CHAPTER_TIME_START = b"\x91"
CHAPTER_TIME_END = b"\x92"
CHAPTER_DISPLAY = b"\x80"
CHAPTER_STRING = b"\x85"
CHAPTER_LANGUAGE = b"\x43\x7c"

VOID = b"\xec"

# Human-readable names for log messages
ELEMENT_NAMES: dict[bytes, str] = {
    EBML_HEADER: "EBML",
    SEGMENT: "Segment",
    SEEK_HEAD: "SeekHead",
    SEEK: "Seek",
    SEEK_ID: "SeekID",
    SEEK_POSITION: "SeekPosition",
    CHAPTERS: "Chapters",
    EDITION_ENTRY: "EditionEntry",
    CHAPTER_ATOM: "ChapterAtom",
    CHAPTER_TIME_START: "ChapterTimeStart",
    CHAPTER_TIME_END: "ChapterTimeEnd",
    CHAPTER_DISPLAY: "ChapterDisplay",
    CHAPTER_STRING: "ChapString",
    CHAPTER_LANGUAGE: "ChapLanguage",
    VOID: "Void",
}


def element_name(element_id: bytes) -> str:
    """Name of a known element, or its hex ID."""
    return ELEMENT_NAMES.get(element_id, element_id.hex().upper())
