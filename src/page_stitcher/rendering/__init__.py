"""
Module: rendering

Purpose:
    Front end that turns a source document into per-page raster images
    for the stitching pipeline.

Key Modules:
    - pdf: PyMuPDF page rendering
"""

from .pdf import RenderConfig, render_document, get_page_count, trailer_source

__all__ = [
    "RenderConfig",
    "render_document",
    "get_page_count",
    "trailer_source",
]
