"""
Module: pages

Purpose:
    Page-level models: the caller-facing input pair, a loaded page with
    its pixel dimensions, and the ordered page set that fixes stacking
    order.

Key Classes:
    - PageSource: Location handle plus display name (input)
    - PageImage: Loaded page with validated dimensions
    - OrderedPageSet: Final top-to-bottom page sequence

Used By:
    - stitching.loader: Creates PageImage from PageSource
    - stitching.ordering: Creates OrderedPageSet
    - stitching.compositor: Consumes OrderedPageSet
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional, Tuple

# Reserved display name of the image pinned to the bottom of the stack
TRAILER_NAME = "lastpic.png"


@dataclass(frozen=True, slots=True)
class PageSource:
    """
    A stored page image to be stitched.

    Attributes:
        location: Path to the stored image bytes.
        display_name: Name used only for ordering. Defaults to the
            file name of `location`.

    Example:
        >>> PageSource(Path("/tmp/s1/page-002.png")).display_name
        'page-002.png'
        >>> PageSource(Path("/assets/footer.png"), TRAILER_NAME).is_trailer
        True
    """

    location: Path
    display_name: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "location", Path(self.location))
        if self.display_name is None:
            object.__setattr__(self, "display_name", self.location.name)
        if not self.display_name:
            raise ValueError(f"display_name must not be empty: {self.location}")

    @property
    def is_trailer(self) -> bool:
        return self.display_name == TRAILER_NAME


@dataclass(frozen=True, slots=True)
class PageImage:
    """
    A page image whose dimensions have been read from its header.

    Attributes:
        source_path: Path to the stored image bytes.
        width: Pixel width (> 0).
        height: Pixel height (> 0).
        display_name: Name used only for ordering.

    Invariants:
        - width > 0
        - height > 0
    """

    source_path: Path
    width: int
    height: int
    display_name: str

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise ValueError(f"width must be > 0: {self.width} ({self.display_name})")
        if self.height <= 0:
            raise ValueError(f"height must be > 0: {self.height} ({self.display_name})")

    @property
    def is_trailer(self) -> bool:
        """True if this page is pinned to the bottom of the stack."""
        return self.display_name == TRAILER_NAME


@dataclass(frozen=True)
class OrderedPageSet:
    """
    Pages in final stacking order, top to bottom.

    Built by `stitching.ordering.order_pages`; the tuple order is the
    order pages are composited.

    Invariants:
        - At least one page
    """

    pages: Tuple[PageImage, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.pages:
            raise ValueError("OrderedPageSet requires at least one page")

    def __len__(self) -> int:
        return len(self.pages)

    def __iter__(self) -> Iterator[PageImage]:
        return iter(self.pages)

    def __getitem__(self, index: int) -> PageImage:
        return self.pages[index]

    @property
    def display_names(self) -> list[str]:
        return [page.display_name for page in self.pages]
