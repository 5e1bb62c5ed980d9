"""
Module: rendering.pdf

Purpose:
    PDF rendering front end. Renders each page of a PDF to a PNG file
    that the stitching pipeline can load, and builds the matching page
    sources (optionally with a trailer image appended).

Key Functions:
    - render_document(): Render PDF pages to page-NNN.png files
    - get_page_count(): Number of pages in a PDF
    - trailer_source(): PageSource for the pinned trailer image

Key Classes:
    - RenderConfig: Scale factor and page limit

Dependencies:
    - fitz (PyMuPDF): PDF rendering
    - PIL.Image: PNG writing

Used By:
    - cli: `render` and `convert` commands
"""

from __future__ import annotations

import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List

import fitz
from PIL import Image

from page_stitcher.core.errors import DecodeError, NotFoundError, PersistError
from page_stitcher.core.models import TRAILER_NAME, PageSource

logger = logging.getLogger(__name__)

DEFAULT_SCALE = 2.0  # 144 DPI
DEFAULT_MAX_PAGES = 30
MAX_SCALE = 8.0


@dataclass(frozen=True)
class RenderConfig:
    """
    Configuration for rendering PDF pages.

    Attributes:
        scale: Zoom relative to 72 DPI (default 2.0).
        max_pages: Only the first `max_pages` pages are rendered (default 30).
    """

    scale: float = DEFAULT_SCALE
    max_pages: int = DEFAULT_MAX_PAGES

    def __post_init__(self) -> None:
        if not 0 < self.scale <= MAX_SCALE:
            raise ValueError(f"scale must be in (0, {MAX_SCALE}]: {self.scale}")
        if self.max_pages < 1:
            raise ValueError(f"max_pages must be >= 1: {self.max_pages}")

    @property
    def dpi(self) -> int:
        return round(72 * self.scale)


def page_filename(page_number: int) -> str:
    """Zero-padded name so lexical order equals page order ('page-001.png')."""
    return f"page-{page_number:03d}.png"


def _open_document(pdf_path: Path) -> fitz.Document:
    if not pdf_path.is_file():
        raise NotFoundError(pdf_path)
    try:
        return fitz.open(pdf_path)
    except (RuntimeError, ValueError) as e:
        raise DecodeError(pdf_path, str(e)) from e


def get_page_count(pdf_path: Path) -> int:
    """Get total page count."""
    with _open_document(Path(pdf_path)) as doc:
        return doc.page_count


def render_document(
    pdf_path: Path,
    output_dir: Path,
    config: RenderConfig = RenderConfig(),
) -> List[PageSource]:
    """
    Render PDF pages to PNG files.

    Args:
        pdf_path: PDF to render.
        output_dir: Directory receiving page-NNN.png files.
        config: Scale and page limit.

    Returns:
        One PageSource per rendered page, in page order.

    Raises:
        NotFoundError: If the PDF does not exist.
        DecodeError: If the PDF cannot be opened or has no pages.
        PersistError: If page images cannot be written to `output_dir`.

    Example:
        >>> sources = render_document(Path("slides.pdf"), Path("/tmp/s1"))
        >>> [s.display_name for s in sources][:2]
        ['page-001.png', 'page-002.png']
    """
    pdf_path = Path(pdf_path)
    output_dir = Path(output_dir)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PersistError(f"Cannot create page directory {output_dir}: {e}", output_dir) from e

    sources: List[PageSource] = []
    with _open_document(pdf_path) as doc:
        total = doc.page_count
        if total == 0:
            raise DecodeError(pdf_path, "document has no pages")
        to_render = min(total, config.max_pages)
        if to_render < total:
            logger.warning(
                f"{pdf_path.name} has {total} pages; rendering the first {to_render}"
            )
        logger.info(f"Rendering {to_render} page(s) of {pdf_path.name} at {config.dpi} DPI")

        matrix = fitz.Matrix(config.scale, config.scale)
        for index in range(to_render):
            pix = doc[index].get_pixmap(matrix=matrix, alpha=False)
            image = Image.frombytes("RGB", (pix.width, pix.height), pix.samples)
            target = output_dir / page_filename(index + 1)
            _write_png(image, target)
            logger.debug(f"Rendered page {index + 1}: {pix.width}x{pix.height} → {target.name}")
            sources.append(PageSource(target))

    return sources


def trailer_source(path: Path) -> PageSource:
    """PageSource for an image pinned to the bottom of the stack."""
    return PageSource(Path(path), TRAILER_NAME)


def _write_png(image: Image.Image, path: Path) -> None:
    """Write image atomically using temp file."""
    temp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="wb",
            suffix=".png",
            dir=path.parent,
            delete=False,
        ) as f:
            temp_path = Path(f.name)
            image.save(f, format="PNG", compress_level=1)
        # Use replace() instead of rename() for Windows compatibility
        temp_path.replace(path)
        temp_path = None
    except OSError as e:
        raise PersistError(f"Failed to write page image {path}: {e}", path) from e
    finally:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
