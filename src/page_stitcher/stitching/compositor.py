"""
Module: stitching.compositor

Purpose:
    Creates the stitched "long image". Computes the canvas geometry for
    an ordered page set, then composites every page onto an opaque white
    canvas, horizontally centered and stacked without gaps.

Key Functions:
    - compute_layout(): Canvas size and per-page placements in one pass
    - render_canvas(): Composite pages onto a white RGB canvas

Dependencies:
    - PIL.Image: Canvas allocation and pasting

Used By:
    - stitching.pipeline: Renders the canvas once per request
"""

from __future__ import annotations

import logging
from typing import List, Tuple

from PIL import Image, UnidentifiedImageError

from page_stitcher.core.errors import CompositionError, DecodeError, NotFoundError
from page_stitcher.core.models import (
    CanvasLayout,
    CanvasSpec,
    OrderedPageSet,
    Placement,
)

logger = logging.getLogger(__name__)

WHITE = (255, 255, 255)


def compute_layout(ordered: OrderedPageSet) -> CanvasLayout:
    """
    Compute canvas size and page placements.

    Canvas width is the widest page; canvas height is the exact sum of
    page heights. Each page is centered horizontally
    (left = floor((canvas_width - page_width) / 2)) and placed directly
    below the previous one.

    Args:
        ordered: Pages in stacking order.

    Returns:
        CanvasLayout with one Placement per page.

    Example:
        >>> layout = compute_layout(ordered)  # widths 50/80/60, heights 100/200/150
        >>> layout.canvas.size
        (80, 450)
        >>> [(p.top, p.left) for p in layout.placements]
        [(0, 15), (100, 0), (300, 10)]
    """
    max_width = max(page.width for page in ordered)

    placements: List[Placement] = []
    y_offset = 0
    for page in ordered:
        left = (max_width - page.width) // 2
        placements.append(Placement(page=page, top=y_offset, left=left))
        logger.debug(f"Positioned {page.display_name} at x:{left}, y:{y_offset}")
        y_offset += page.height

    canvas = CanvasSpec(width=max_width, height=y_offset)
    logger.info(f"Canvas {canvas.width}x{canvas.height}px for {len(placements)} page(s)")
    return CanvasLayout(canvas=canvas, placements=tuple(placements))


def render_canvas(
    layout: CanvasLayout,
    background: Tuple[int, int, int] = WHITE,
) -> Image.Image:
    """
    Composite all pages onto an opaque canvas.

    Pages are pasted in placement order. Any alpha channel is flattened
    against the background, so the returned image is plain RGB.

    Args:
        layout: Geometry from `compute_layout`.
        background: RGB fill colour. Defaults to white.

    Returns:
        RGB image of size layout.canvas.size.

    Raises:
        CompositionError: If a page's decoded pixels would fall outside
            the canvas (stored file differs from loaded metadata).
        NotFoundError: If a page file disappeared since loading.
        DecodeError: If a page file can no longer be decoded.
    """
    canvas_spec = layout.canvas
    composite = Image.new("RGB", canvas_spec.size, background)

    for placement in layout.placements:
        page = placement.page
        path = page.source_path
        try:
            with Image.open(path) as img:
                width, height = img.size
                if not placement.fits(canvas_spec, width, height):
                    raise CompositionError(
                        f"Page {page.display_name} ({width}x{height}) at "
                        f"x:{placement.left}, y:{placement.top} exceeds canvas "
                        f"{canvas_spec.width}x{canvas_spec.height}",
                        location=path,
                    )
                _paste_flattened(composite, img, (placement.left, placement.top))
        except FileNotFoundError as e:
            raise NotFoundError(path, str(e)) from e
        except UnidentifiedImageError as e:
            raise DecodeError(path, str(e)) from e
        except (OSError, ValueError) as e:
            raise DecodeError(path, str(e)) from e

    return composite


def _paste_flattened(
    canvas: Image.Image,
    img: Image.Image,
    position: Tuple[int, int],
) -> None:
    """Paste `img` onto an RGB canvas, blending any transparency onto it."""
    has_alpha = (
        img.mode in ("RGBA", "LA", "PA")
        or (img.mode == "P" and "transparency" in img.info)
    )
    if has_alpha:
        rgba = img.convert("RGBA")
        canvas.paste(rgba, position, mask=rgba)
    else:
        canvas.paste(img.convert("RGB"), position)
