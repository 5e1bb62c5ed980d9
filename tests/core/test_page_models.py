"""
Tests for core.models (pages, canvas, encoding)

Test Coverage:
- PageSource: display name defaulting, trailer detection
- PageImage / Placement / CanvasSpec: construction-time validation
- StitchResult: within_limit and summary
"""

import pytest
from pathlib import Path

from page_stitcher.core.models import (
    TRAILER_NAME,
    CanvasSpec,
    EncodingAttempt,
    OrderedPageSet,
    PageImage,
    PageSource,
    Placement,
    QualitySearch,
    StitchResult,
)


class TestPageSource:
    def test_display_name_defaults_to_file_name(self):
        source = PageSource(Path("/data/s1/page-002.png"))
        assert source.display_name == "page-002.png"

    def test_accepts_string_location(self):
        source = PageSource("/data/s1/page-001.png")
        assert isinstance(source.location, Path)

    def test_explicit_trailer_name_marks_trailer(self):
        source = PageSource(Path("/assets/footer.png"), TRAILER_NAME)
        assert source.is_trailer
        assert not PageSource(Path("/assets/footer.png")).is_trailer

    def test_empty_display_name_rejected(self):
        with pytest.raises(ValueError, match="display_name"):
            PageSource(Path("/data/x.png"), "")


class TestPageImage:
    def test_zero_width_rejected(self):
        with pytest.raises(ValueError, match="width"):
            PageImage(Path("a.png"), 0, 10, "a.png")

    def test_negative_height_rejected(self):
        with pytest.raises(ValueError, match="height"):
            PageImage(Path("a.png"), 10, -1, "a.png")

    def test_is_frozen(self):
        page = PageImage(Path("a.png"), 10, 10, "a.png")
        with pytest.raises(AttributeError):
            page.width = 20


class TestGeometryModels:
    def test_ordered_page_set_requires_pages(self):
        with pytest.raises(ValueError):
            OrderedPageSet(pages=())

    def test_canvas_rejects_empty_size(self):
        with pytest.raises(ValueError):
            CanvasSpec(width=0, height=10)

    def test_placement_rejects_negative_left(self):
        page = PageImage(Path("a.png"), 10, 10, "a.png")
        with pytest.raises(ValueError, match="left"):
            Placement(page=page, top=0, left=-1)

    def test_placement_fits_checks_all_edges(self):
        page = PageImage(Path("a.png"), 60, 150, "a.png")
        placement = Placement(page=page, top=300, left=10)
        canvas = CanvasSpec(width=80, height=450)

        assert placement.fits(canvas, 60, 150)
        assert not placement.fits(canvas, 71, 150)
        assert not placement.fits(canvas, 60, 151)
        assert placement.right == 70
        assert placement.bottom == 450


class TestEncodingModels:
    def test_stitch_result_within_limit(self):
        result = StitchResult(
            final_quality=50,
            final_byte_size=12 * 1024 * 1024,
            artifact_path=Path("out.png"),
            canvas_width=80,
            canvas_height=450,
            max_bytes=10 * 1024 * 1024,
        )
        assert not result.within_limit
        assert "OVER LIMIT" in result.summary()
        assert result.size_mb == pytest.approx(12.0)

    def test_quality_search_exhausted_when_accepted_oversized(self):
        attempt = EncodingAttempt(quality=50, byte_size=20, success=False)
        search = QualitySearch(accepted=attempt, attempts=(attempt,))
        assert search.exhausted
        assert search.attempt_count == 1
