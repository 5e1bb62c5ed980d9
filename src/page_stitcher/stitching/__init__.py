"""
Module: stitching

Purpose:
    Stitching subpackage: turns a set of page images into one
    vertically stacked long image whose encoded size fits a byte budget.

Key Modules:
    - loader: Page metadata loading (all-or-nothing)
    - ordering: Stacking order with the trailer page pinned last
    - compositor: Canvas geometry and rendering
    - encoder: Quality-parameterised encoding and scratch files
    - optimizer: Quality search against the byte ceiling
    - finalizer: Atomic, write-once artifact persistence
    - pipeline: End-to-end orchestration
    - retention: Sweep of expired artifacts

Dependencies:
    - PIL: Image loading, compositing and encoding
    - page_stitcher.core: Models and errors
"""

from .config import StitchConfig, StorageConfig
from .loader import load_pages, load_page
from .ordering import order_pages
from .compositor import compute_layout, render_canvas
from .encoder import ScratchArea, encode_image, make_encoder
from .optimizer import find_optimal_quality
from .finalizer import finalize
from .pipeline import stitch_pages

__all__ = [
    # Config
    "StitchConfig",
    "StorageConfig",
    # Stages
    "load_pages",
    "load_page",
    "order_pages",
    "compute_layout",
    "render_canvas",
    "ScratchArea",
    "encode_image",
    "make_encoder",
    "find_optimal_quality",
    "finalize",
    # Pipeline
    "stitch_pages",
]
