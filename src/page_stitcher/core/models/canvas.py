"""
Module: canvas

Purpose:
    Canvas geometry models - the combined canvas size and the position
    of each page on it.

Key Classes:
    - CanvasSpec: Combined canvas dimensions
    - Placement: Top-left position of one page on the canvas
    - CanvasLayout: Canvas plus ordered placements

Used By:
    - stitching.compositor: Computes and renders layouts
    - stitching.finalizer: Reports canvas size in StitchResult
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .pages import PageImage


@dataclass(frozen=True, slots=True)
class CanvasSpec:
    """
    Combined canvas dimensions in pixels.

    Attributes:
        width: Maximum page width over the set.
        height: Exact sum of page heights over the set.
    """

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"canvas must be non-empty: {self.width}x{self.height}")

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height) as PIL expects it."""
        return (self.width, self.height)


@dataclass(frozen=True, slots=True)
class Placement:
    """
    Where one page is drawn on the canvas.

    The page occupies [left, left + width) x [top, top + height).

    Attributes:
        page: The page being placed.
        top: Cumulative height of all preceding pages.
        left: floor((canvas.width - page.width) / 2).

    Invariants:
        - top >= 0
        - left >= 0
    """

    page: PageImage
    top: int
    left: int

    def __post_init__(self) -> None:
        if self.top < 0:
            raise ValueError(f"top must be >= 0: {self.top}")
        if self.left < 0:
            raise ValueError(f"left must be >= 0: {self.left}")

    @property
    def right(self) -> int:
        return self.left + self.page.width

    @property
    def bottom(self) -> int:
        return self.top + self.page.height

    def fits(self, canvas: CanvasSpec, width: int, height: int) -> bool:
        """Check that a `width` x `height` raster drawn here stays on `canvas`."""
        return (
            self.left >= 0
            and self.top >= 0
            and self.left + width <= canvas.width
            and self.top + height <= canvas.height
        )


@dataclass(frozen=True)
class CanvasLayout:
    """
    Canvas geometry and page placements computed in one pass.

    Attributes:
        canvas: Combined canvas size.
        placements: One Placement per page, in stacking order.
    """

    canvas: CanvasSpec
    placements: Tuple[Placement, ...]

    @property
    def page_count(self) -> int:
        return len(self.placements)
