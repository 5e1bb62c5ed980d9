"""
Tests for stitching.compositor

Test Coverage:
- compute_layout(): canvas size, centering offsets, running top offset
- render_canvas(): white background, page pixels, alpha flattening
- Edge cases: stored file larger than loaded metadata
"""

import pytest
from pathlib import Path

from page_stitcher.core.errors import CompositionError, NotFoundError
from page_stitcher.core.models import OrderedPageSet, PageImage, PageSource
from page_stitcher.stitching.compositor import compute_layout, render_canvas
from page_stitcher.stitching.loader import load_pages
from page_stitcher.stitching.ordering import order_pages


def _page(name: str, width: int, height: int) -> PageImage:
    return PageImage(Path("/pages") / name, width, height, name)


class TestComputeLayout:
    def test_three_page_scenario(self):
        """Widths 50/80/60, heights 100/200/150 → 80x450 canvas."""
        ordered = OrderedPageSet(pages=(
            _page("p1.png", 50, 100),
            _page("p2.png", 80, 200),
            _page("p3.png", 60, 150),
        ))

        layout = compute_layout(ordered)

        assert layout.canvas.size == (80, 450)
        assert [(p.top, p.left) for p in layout.placements] == [(0, 15), (100, 0), (300, 10)]

    def test_height_is_exact_sum_and_width_is_max(self):
        sizes = [(33, 17), (101, 1), (7, 999), (100, 250)]
        ordered = OrderedPageSet(pages=tuple(_page(f"{i}.png", w, h) for i, (w, h) in enumerate(sizes)))

        layout = compute_layout(ordered)

        assert layout.canvas.height == sum(h for _, h in sizes)
        assert layout.canvas.width == max(w for w, _ in sizes)

    def test_odd_difference_floors_left(self):
        ordered = OrderedPageSet(pages=(_page("a.png", 10, 5), _page("b.png", 13, 5)))
        layout = compute_layout(ordered)
        assert layout.placements[0].left == 1  # floor(3 / 2)

    def test_placements_stay_inside_and_never_overlap(self):
        ordered = OrderedPageSet(pages=tuple(
            _page(f"{i}.png", 10 + 7 * i, 5 + i) for i in range(6)
        ))
        layout = compute_layout(ordered)

        previous_bottom = 0
        for placement in layout.placements:
            assert placement.left >= 0
            assert placement.left + placement.page.width <= layout.canvas.width
            assert placement.top == previous_bottom
            previous_bottom = placement.bottom
        assert previous_bottom == layout.canvas.height


class TestRenderCanvas:
    def test_pages_centered_on_white(self, make_image):
        red = make_image("a.png", size=(50, 100), color=(255, 0, 0))
        blue = make_image("b.png", size=(80, 200), color=(0, 0, 255))
        layout = compute_layout(order_pages(load_pages([PageSource(red), PageSource(blue)])))

        canvas = render_canvas(layout)

        assert canvas.mode == "RGB"
        assert canvas.size == (80, 300)
        assert canvas.getpixel((0, 0)) == (255, 255, 255)  # margin beside narrow page
        assert canvas.getpixel((15, 0)) == (255, 0, 0)
        assert canvas.getpixel((64, 99)) == (255, 0, 0)
        assert canvas.getpixel((65, 50)) == (255, 255, 255)
        assert canvas.getpixel((0, 100)) == (0, 0, 255)

    def test_transparent_pixels_become_white(self, make_image):
        clear = make_image("a.png", size=(20, 20), color=(0, 0, 0, 0), mode="RGBA")
        layout = compute_layout(order_pages(load_pages([PageSource(clear)])))

        canvas = render_canvas(layout)

        assert canvas.mode == "RGB"
        assert canvas.getpixel((10, 10)) == (255, 255, 255)

    def test_half_transparent_pixels_blend_with_white(self, make_image):
        half = make_image("a.png", size=(4, 4), color=(0, 0, 0, 128), mode="RGBA")
        layout = compute_layout(order_pages(load_pages([PageSource(half)])))

        r, g, b = render_canvas(layout).getpixel((1, 1))

        assert 120 <= r <= 135
        assert r == g == b

    def test_stored_file_larger_than_metadata_raises(self, make_image):
        """Metadata says 10x10 but the stored file is 40x40."""
        path = make_image("a.png", size=(40, 40))
        stale = PageImage(path, 10, 10, "a.png")
        layout = compute_layout(OrderedPageSet(pages=(stale,)))

        with pytest.raises(CompositionError, match="exceeds canvas"):
            render_canvas(layout)

    def test_file_removed_after_loading_raises_not_found(self, make_image):
        path = make_image("a.png", size=(10, 10))
        layout = compute_layout(order_pages(load_pages([PageSource(path)])))
        path.unlink()

        with pytest.raises(NotFoundError):
            render_canvas(layout)
