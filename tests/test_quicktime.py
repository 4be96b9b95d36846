"""Tests for the QuickTime chapter track resolver."""

from __future__ import annotations

from media_builders import FTYP, box, build_mp4, u32

from chapterkit.cursor import ByteCursor
from chapterkit.iso import resolve_quicktime_chapters
from chapterkit.models import TICKS_PER_SECOND, ChapterSource, ParseStatus

TITLES = ["Intro", "Middle", "End"]
DURATIONS = [5000, 10000, 15000]  # ms at time scale 1000


def resolve(data: bytes):
    return resolve_quicktime_chapters(ByteCursor.from_bytes(data))


class TestQuickTimeChapters:
    """Tests for decoding a well-formed chapter track."""

    def test_titles_and_start_times(self) -> None:
        """The first stts entry is a placeholder; later entries accumulate."""
        result = resolve(build_mp4(TITLES, DURATIONS))

        assert result.status is ParseStatus.FOUND
        assert result.source is ChapterSource.QUICKTIME
        assert [c.title for c in result.chapters] == TITLES
        assert [c.start_time for c in result.chapters] == [
            0,
            10 * TICKS_PER_SECOND,
            25 * TICKS_PER_SECOND,
        ]

    def test_end_times_forward_filled(self) -> None:
        """Each end time is the next start; the last stays open."""
        result = resolve(build_mp4(TITLES, DURATIONS))
        assert [c.end_time for c in result.chapters] == [
            10 * TICKS_PER_SECOND,
            25 * TICKS_PER_SECOND,
            None,
        ]

    def test_languages_unknown(self) -> None:
        """Chapter tracks carry one title with no language."""
        result = resolve(build_mp4(TITLES, DURATIONS))
        assert all(c.languages == ("",) for c in result.chapters)

    def test_time_scale_applied(self) -> None:
        """Durations are divided by the mdhd time scale."""
        result = resolve(build_mp4(["A", "B"], [0, 900], time_scale=600))
        assert result.chapters[1].start_time == 15_000_000

    def test_zero_time_scale_treated_as_one(self) -> None:
        """A zero time scale does not divide by zero."""
        result = resolve(build_mp4(["A", "B"], [0, 3], time_scale=0))
        assert result.chapters[1].start_time == 3 * TICKS_PER_SECOND

    def test_single_chapter(self) -> None:
        """One stts entry yields one chapter at 0."""
        result = resolve(build_mp4(["Only"], [42]))
        assert result.ok
        assert len(result.chapters) == 1
        assert result.chapters[0].start_time == 0
        assert result.chapters[0].end_time is None

    def test_utf8_titles(self) -> None:
        """Titles are decoded as UTF-8."""
        result = resolve(build_mp4(["Prólogo", "章"], [0, 1000]))
        assert [c.title for c in result.chapters] == ["Prólogo", "章"]

    def test_stco_before_stts(self) -> None:
        """Table order inside stbl does not matter."""
        result = resolve(build_mp4(TITLES, DURATIONS, stco_first=True))
        assert [c.title for c in result.chapters] == TITLES


class TestChapterTrackLookup:
    """Tests for locating the referenced trak."""

    def test_chapter_track_after_reference(self) -> None:
        """Track 3 referenced from track 1 skips one trak."""
        data = build_mp4(TITLES, DURATIONS, traks=("ref", "audio", "chapter"), chapter_track_id=3)
        assert [c.title for c in resolve(data).chapters] == TITLES

    def test_chapter_track_before_reference(self) -> None:
        """A lower track ID is counted from the start of moov."""
        data = build_mp4(TITLES, DURATIONS, traks=("chapter", "ref"), chapter_track_id=1)
        assert [c.title for c in resolve(data).chapters] == TITLES

    def test_self_reference_reads_referring_trak(self) -> None:
        """A reference to the referring track's own index reads that trak."""
        data = build_mp4(TITLES, DURATIONS, traks=("audio", "ref", "chapter"), chapter_track_id=2)
        result = resolve(data)
        assert result.status is ParseStatus.NOT_FOUND
        assert "minf" in result.reason

    def test_track_beyond_last(self) -> None:
        """A track number past the last trak is not found."""
        data = build_mp4(TITLES, DURATIONS, chapter_track_id=9)
        result = resolve(data)
        assert result.status is ParseStatus.NOT_FOUND
        assert "not present" in result.reason

    def test_track_zero_malformed(self) -> None:
        """Track 0 is never a valid reference."""
        result = resolve(build_mp4(TITLES, DURATIONS, chapter_track_id=0))
        assert result.status is ParseStatus.MALFORMED


class TestQuickTimeFailures:
    """Tests for missing and inconsistent structures."""

    def test_no_moov(self) -> None:
        """A file without moov has no chapters."""
        result = resolve(FTYP + box(b"mdat", bytes(16)))
        assert result.status is ParseStatus.NOT_FOUND
        assert result.reason == "No moov box"

    def test_no_chapter_reference(self) -> None:
        """Without tref/chap there is no chapter track."""
        result = resolve(build_mp4(TITLES, DURATIONS, traks=("audio", "chapter")))
        assert result.status is ParseStatus.NOT_FOUND
        assert result.to_list() is None

    def test_stco_count_mismatch(self) -> None:
        """More title offsets than chapters is malformed."""
        result = resolve(build_mp4(TITLES, DURATIONS, stco_extra=1))
        assert result.status is ParseStatus.MALFORMED
        assert result.chapters == ()
        assert result.to_list() is None

    def test_huge_sample_count_rejected(self) -> None:
        """An stts sample count beyond the stco titles fails without expanding it."""
        data = build_mp4(TITLES, stts_entries=[(1, 0), (0xFFFFFFFF, 1)])
        result = resolve(data)
        assert result.status is ParseStatus.MALFORMED
        assert "more chapters than the 3 titles" in result.reason

    def test_fewer_titles_than_samples(self) -> None:
        """stts expanding past the stco count is malformed."""
        data = build_mp4(TITLES, stts_entries=[(1, 0), (3, 1000)])
        assert resolve(data).status is ParseStatus.MALFORMED

    def test_repeated_samples_expand(self) -> None:
        """One stts entry with a count > 1 yields several chapters."""
        data = build_mp4(TITLES, stts_entries=[(1, 0), (2, 1000)])
        result = resolve(data)
        assert [c.start_time for c in result.chapters] == [0, 10_000_000, 20_000_000]

    def test_title_offset_out_of_range(self) -> None:
        """A title sample beyond the end of the file is malformed."""
        data = build_mp4(["A"], [0])
        # Point the single stco entry past EOF
        marker = b"stco" + bytes(4) + u32(1)
        index = data.index(marker) + len(marker)
        corrupted = data[:index] + u32(len(data) + 100) + data[index + 4 :]
        result = resolve(corrupted)
        assert result.status is ParseStatus.MALFORMED

    def test_truncated_moov(self) -> None:
        """A moov box that claims more bytes than the file holds is malformed."""
        data = build_mp4(TITLES, DURATIONS)
        result = resolve(data[:-10])
        assert result.status is ParseStatus.MALFORMED
