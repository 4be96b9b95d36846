"""Tests for ISO box scanning."""

from __future__ import annotations

import pytest
from media_builders import box, box64, box_to_end, u32

from chapterkit.cursor import ByteCursor
from chapterkit.exceptions import MalformedChapterError
from chapterkit.iso.boxes import BoxScanner, find_box, read_box_header


class TestReadBoxHeader:
    """Tests for box header decoding."""

    def test_plain_box(self) -> None:
        """32-bit size covers the 8-byte header."""
        cursor = ByteCursor.from_bytes(box(b"free", b"abcd"))
        header = read_box_header(cursor, cursor.length)
        assert header.tag == b"free"
        assert (header.start, header.content_start, header.end) == (0, 8, 12)
        assert header.content_size == 4
        assert cursor.position == 8

    def test_extended_size(self) -> None:
        """size == 1 reads a 64-bit size after the tag."""
        cursor = ByteCursor.from_bytes(box64(b"mdat", b"xyz"))
        header = read_box_header(cursor, cursor.length)
        assert header.content_start == 16
        assert header.end == 19

    def test_size_zero_runs_to_end(self) -> None:
        """size == 0 extends to the end of the stream."""
        data = box(b"ftyp", b"M4A ") + box_to_end(b"mdat", bytes(20))
        cursor = ByteCursor.from_bytes(data)
        cursor.seek(12)
        header = read_box_header(cursor, cursor.length)
        assert header.tag == b"mdat"
        assert header.end == len(data)

    def test_undersized_box(self) -> None:
        """A size smaller than the header is malformed."""
        cursor = ByteCursor.from_bytes(u32(4) + b"free")
        with pytest.raises(MalformedChapterError, match="declares size 4"):
            read_box_header(cursor, cursor.length)

    def test_overrunning_box(self) -> None:
        """A box crossing its container end is malformed."""
        cursor = ByteCursor.from_bytes(u32(64) + b"free" + bytes(8))
        with pytest.raises(MalformedChapterError, match="past container end"):
            read_box_header(cursor, cursor.length)


class TestFindBox:
    """Tests for the standalone sibling search."""

    def test_finds_sibling(self) -> None:
        """Returns the payload bounds of the first match."""
        data = box(b"ftyp", b"M4A ") + box(b"moov", b"1234")
        cursor = ByteCursor.from_bytes(data)
        assert find_box(cursor, b"moov", 0, len(data)) == (20, 24)

    def test_missing_box(self) -> None:
        """Returns None when no sibling matches."""
        data = box(b"ftyp", b"M4A ")
        cursor = ByteCursor.from_bytes(data)
        assert find_box(cursor, b"moov", 0, len(data)) is None

    def test_search_end_bounds_result(self) -> None:
        """Boxes beyond search_end are not visited."""
        data = box(b"free") + box(b"moov")
        cursor = ByteCursor.from_bytes(data)
        assert find_box(cursor, b"moov", 0, 8) is None


class TestBoxScanner:
    """Tests for the stack-based scanner."""

    def test_descend_and_leave(self) -> None:
        """find descends; leave resumes after the found box."""
        data = box(b"moov", box(b"trak", box(b"mdia")), box(b"trak", box(b"tref")))
        scanner = BoxScanner(ByteCursor.from_bytes(data))

        moov = scanner.find(b"moov")
        assert moov is not None
        assert scanner.depth == 1

        first = scanner.find(b"trak")
        assert first is not None
        assert scanner.container_end == first.end
        assert scanner.find(b"tref") is None
        scanner.leave()

        second = scanner.find(b"trak")
        assert second is not None
        assert second.start == first.end
        assert scanner.find(b"tref") is not None
        scanner.leave()
        scanner.leave()
        scanner.leave()
        assert scanner.depth == 0

    def test_miss_leaves_stack_unchanged(self) -> None:
        """A failed search pushes nothing."""
        scanner = BoxScanner(ByteCursor.from_bytes(box(b"free")))
        assert scanner.find(b"moov") is None
        assert scanner.depth == 0
        assert scanner.position == scanner.container_end

    def test_child_context_manager(self) -> None:
        """child leaves the box on exit, including on errors."""
        data = box(b"moov", box(b"udta"))
        scanner = BoxScanner(ByteCursor.from_bytes(data))
        with pytest.raises(RuntimeError, match="boom"), scanner.child(b"moov") as moov:
            assert moov is not None
            assert scanner.depth == 1
            raise RuntimeError("boom")
        assert scanner.depth == 0

    def test_child_missing_yields_none(self) -> None:
        """child yields None for an absent box."""
        scanner = BoxScanner(ByteCursor.from_bytes(box(b"free")))
        with scanner.child(b"moov") as moov:
            assert moov is None
        assert scanner.depth == 0

    def test_rewind_restarts_search(self) -> None:
        """rewind allows finding an earlier sibling again."""
        data = box(b"moov", box(b"trak", b"A"), box(b"trak", b"B"))
        scanner = BoxScanner(ByteCursor.from_bytes(data))
        moov = scanner.find(b"moov")
        assert moov is not None
        first = scanner.find(b"trak")
        assert first is not None
        scanner.leave()
        scanner.rewind(moov.content_start)
        again = scanner.find(b"trak")
        assert again == first

    def test_leave_without_find(self) -> None:
        """leave on an empty stack is a programming error."""
        scanner = BoxScanner(ByteCursor.from_bytes(b""))
        with pytest.raises(RuntimeError):
            scanner.leave()

    def test_tag_must_be_four_bytes(self) -> None:
        """Box tags are four characters."""
        scanner = BoxScanner(ByteCursor.from_bytes(b""))
        with pytest.raises(ValueError, match="4 bytes"):
            scanner.find(b"moo")

    def test_child_overrunning_parent(self) -> None:
        """A child box larger than its parent is malformed."""
        inner = u32(100) + b"trak"
        data = box(b"moov", inner)
        scanner = BoxScanner(ByteCursor.from_bytes(data + bytes(100)))
        assert scanner.find(b"moov") is not None
        with pytest.raises(MalformedChapterError):
            scanner.find(b"trak")

    def test_read_payload_u32(self) -> None:
        """Fields are read relative to the current box payload."""
        data = box(b"mdia", bytes(4), u32(600))
        scanner = BoxScanner(ByteCursor.from_bytes(data))
        assert scanner.find(b"mdia") is not None
        assert scanner.read_payload_u32(4) == 600
        with pytest.raises(MalformedChapterError):
            scanner.read_payload_u32(8)
