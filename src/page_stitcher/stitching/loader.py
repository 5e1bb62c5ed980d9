"""
Module: stitching.loader

Purpose:
    Load page image metadata for a stitch request. Reads each image's
    pixel dimensions from its header without decoding pixel data.
    Loading is all-or-nothing: a single missing or undecodable page
    fails the whole batch, since a missing page would silently corrupt
    the canvas geometry.

Key Functions:
    - load_pages(): Load every source into a PageImage
    - load_page(): Load a single source

Dependencies:
    - PIL.Image: Header inspection
    - concurrent.futures: Optional parallel loading

Used By:
    - stitching.pipeline: First pipeline stage
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List

from PIL import Image, UnidentifiedImageError

from page_stitcher.core.errors import DecodeError, NotFoundError
from page_stitcher.core.models import PageImage, PageSource

logger = logging.getLogger(__name__)


def load_page(source: PageSource) -> PageImage:
    """
    Read dimensions of one stored page image.

    Args:
        source: Location and display name of the page.

    Returns:
        PageImage with width/height taken from the image header.

    Raises:
        NotFoundError: If the location is missing or unreadable.
        DecodeError: If the bytes are not a raster image Pillow can open.
    """
    path = source.location
    if not path.is_file():
        raise NotFoundError(path)

    try:
        with Image.open(path) as img:
            width, height = img.size
            fmt = img.format
    except UnidentifiedImageError as e:
        raise DecodeError(path, str(e)) from e
    except FileNotFoundError as e:
        raise NotFoundError(path, str(e)) from e
    except PermissionError as e:
        raise NotFoundError(path, str(e)) from e
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeError(path, str(e)) from e

    if width <= 0 or height <= 0:
        raise DecodeError(path, f"empty raster {width}x{height}")

    logger.debug(f"Loaded {source.display_name}: {width}x{height} {fmt}")
    return PageImage(
        source_path=path,
        width=width,
        height=height,
        display_name=source.display_name,
    )


def load_pages(
    sources: Iterable[PageSource],
    *,
    max_workers: int = 0,
) -> List[PageImage]:
    """
    Load metadata for every page source.

    Reads are independent, so with `max_workers` > 1 they run in a
    thread pool. Results keep input order either way; final stacking
    order is imposed later by `order_pages`.

    Args:
        sources: Page sources to load (at least one).
        max_workers: Worker threads. 0 or 1 loads sequentially.

    Returns:
        One PageImage per source, in input order.

    Raises:
        ValueError: If no sources are given.
        NotFoundError: If any page is missing (no partial result).
        DecodeError: If any page cannot be decoded (no partial result).

    Example:
        >>> pages = load_pages([PageSource(p) for p in sorted(dir.glob("*.png"))])
        >>> sum(p.height for p in pages)
        4680
    """
    sources = list(sources)
    if not sources:
        raise ValueError("At least one page image is required")

    logger.info(f"Loading metadata for {len(sources)} page image(s)")

    if max_workers <= 1 or len(sources) == 1:
        pages = [load_page(source) for source in sources]
    else:
        workers = min(max_workers, len(sources))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            # map() re-raises the first failure in input order
            pages = list(executor.map(load_page, sources))

    logger.info("All page metadata loaded")
    return pages
