"""
Module: stitching.ordering

Purpose:
    Fix the top-to-bottom stacking order of loaded pages. Pages sort by
    display name, except the trailer image (display name "lastpic.png"),
    which is always pinned to the bottom.

Key Functions:
    - order_pages(): Sort pages into an OrderedPageSet
    - page_sort_key(): Tagged sort key (Regular < Trailer)

Used By:
    - stitching.pipeline: Second pipeline stage
"""

from __future__ import annotations

from enum import IntEnum
from typing import Iterable, Tuple

from page_stitcher.core.models import TRAILER_NAME, OrderedPageSet, PageImage


class PageRank(IntEnum):
    """Ordering class of a page; compared before display names."""

    REGULAR = 0
    TRAILER = 1


def classify(display_name: str) -> PageRank:
    return PageRank.TRAILER if display_name == TRAILER_NAME else PageRank.REGULAR


def page_sort_key(page: PageImage) -> Tuple[PageRank, str]:
    """
    Sort key placing trailer pages after every regular page.

    Names compare by code point, so ordering is case-sensitive
    ("B.png" < "a.png").
    """
    return (classify(page.display_name), page.display_name)


def order_pages(pages: Iterable[PageImage]) -> OrderedPageSet:
    """
    Sort pages into final stacking order.

    The sort is stable and idempotent: ordering an already ordered set
    returns the same sequence.

    Args:
        pages: Loaded pages in any order.

    Returns:
        OrderedPageSet, trailer page(s) last.

    Raises:
        ValueError: If `pages` is empty.

    Example:
        >>> order_pages(pages).display_names
        ['a.png', 'b.png', 'lastpic.png']
    """
    return OrderedPageSet(pages=tuple(sorted(pages, key=page_sort_key)))
