"""
Module: stitching.pipeline

Purpose:
    Orchestrate one stitch request end to end.
    Load → Order → Layout → Render → Optimize → Finalize

Key Functions:
    - stitch_pages(): Main entry point for stitching page images

Dependencies:
    - stitching.loader, ordering, compositor, encoder, optimizer, finalizer
    - stitching.retention: Optional sweep of expired artifacts

Used By:
    - cli: `stitch` and `convert` commands
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import Iterable, Optional

from page_stitcher.core.models import PageSource, StitchResult

from .compositor import compute_layout, render_canvas
from .config import StitchConfig, StorageConfig
from .encoder import ScratchArea, make_encoder
from .finalizer import artifact_name, finalize
from .loader import load_pages
from .optimizer import find_optimal_quality
from .ordering import order_pages
from .retention import sweep_expired_artifacts

logger = logging.getLogger(__name__)


def stitch_pages(
    sources: Iterable[PageSource],
    config: Optional[StitchConfig] = None,
    storage: Optional[StorageConfig] = None,
    *,
    request_id: Optional[str] = None,
) -> StitchResult:
    """
    Stitch page images into one size-bounded long image.

    Pipeline:
    1. Sweep expired artifacts (if retention is configured)
    2. Load page metadata (all-or-nothing)
    3. Order pages, trailer last
    4. Compute canvas layout and render the composite once
    5. Search for the highest quality within max_bytes
    6. Promote the accepted encode to the artifact path

    Scratch encodes live in a per-request directory that is removed
    before this function returns, on success or on any exception.

    Args:
        sources: Page images to stitch.
        config: Quality/size settings. Defaults to StitchConfig().
        storage: Scratch/output roots. Defaults to StorageConfig.from_env().
        request_id: Unique id for the artifact name. Defaults to a
            fresh uuid4 hex string.

    Returns:
        StitchResult for the written artifact. `within_limit` is False
        when the minimum quality was accepted despite being oversized.

    Raises:
        NotFoundError, DecodeError: Input page problems.
        CompositionError: Page pixels don't fit the computed canvas.
        PersistError: A storage root, scratch encode or the artifact could
            not be written.

    Example:
        >>> result = stitch_pages(
        ...     [PageSource(p) for p in pages_dir.glob("page-*.png")],
        ...     StitchConfig(max_bytes=4 * 1024 * 1024),
        ... )
        >>> print(result.summary())
    """
    config = config or StitchConfig()
    storage = storage or StorageConfig.from_env()
    request_id = request_id or uuid.uuid4().hex
    start_time = time.perf_counter()

    storage.ensure_dirs()
    artifact_path = storage.output_root / artifact_name(request_id, config.extension)
    logger.info(f"Starting stitch request {request_id}, output: {artifact_path}")

    if config.retention_seconds is not None:
        sweep_expired_artifacts(storage.output_root, config.retention_seconds)

    # 1. Load
    pages = load_pages(sources, max_workers=config.load_workers)

    # 2. Order
    ordered = order_pages(pages)
    logger.info(f"Page order: {', '.join(ordered.display_names)}")

    # 3. Layout + render
    layout = compute_layout(ordered)
    canvas_image = render_canvas(layout)

    # 4. Optimize + 5. Finalize
    with ScratchArea(storage.scratch_root, extension=config.extension) as scratch:
        search = find_optimal_quality(
            make_encoder(canvas_image, config.image_format),
            scratch,
            start_quality=config.start_quality,
            min_quality=config.min_quality,
            max_bytes=config.max_bytes,
        )
        result = finalize(
            search.accepted,
            artifact_path,
            canvas=layout.canvas,
            max_bytes=config.max_bytes,
        )

    elapsed = time.perf_counter() - start_time
    if not result.within_limit:
        logger.warning(
            f"Artifact exceeds size limit: {result.final_byte_size:,} > {config.max_bytes:,} bytes"
        )
    logger.info(
        f"Stitching completed with quality {result.final_quality} and size "
        f"{result.size_mb:.2f}MB after {search.attempt_count} encode(s) in {elapsed:.1f}s"
    )
    return result
