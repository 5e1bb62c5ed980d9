"""
Module: stitching.finalizer

Purpose:
    Promotes the accepted scratch encode to the final artifact location
    and reports its quality and size. The write is atomic (temp file in
    the destination directory, then rename) and write-once: an existing
    artifact is never overwritten.

Key Functions:
    - finalize(): Persist the accepted attempt and build the StitchResult
    - artifact_name(): Standard artifact file name for a request

Dependencies:
    - tempfile, shutil: Atomic copy into place

Used By:
    - stitching.pipeline: Final pipeline stage
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path

from page_stitcher.core.errors import PersistError
from page_stitcher.core.models import CanvasSpec, EncodingAttempt, StitchResult

logger = logging.getLogger(__name__)

ARTIFACT_PREFIX = "stitched-"


def artifact_name(request_id: str, extension: str) -> str:
    """File name of the artifact for `request_id`, e.g. 'stitched-<id>.png'."""
    return f"{ARTIFACT_PREFIX}{request_id}.{extension}"


def finalize(
    attempt: EncodingAttempt,
    artifact_path: Path,
    *,
    canvas: CanvasSpec,
    max_bytes: int,
) -> StitchResult:
    """
    Persist the accepted encoding as the final artifact.

    Args:
        attempt: Attempt chosen by the optimizer; its scratch file must
            still exist.
        artifact_path: Final location (unique per request).
        canvas: Canvas geometry, reported back to the caller.
        max_bytes: Ceiling the search ran against.

    Returns:
        StitchResult describing the written artifact.

    Raises:
        PersistError: If the artifact already exists, the scratch bytes
            are gone, or the write fails. Never degraded silently.
    """
    artifact_path = Path(artifact_path)
    scratch_path = attempt.scratch_path

    def _fail(reason: str) -> PersistError:
        return PersistError(
            reason,
            artifact_path,
            quality=attempt.quality,
            byte_size=attempt.byte_size,
        )

    if scratch_path is None or not scratch_path.is_file():
        raise _fail(f"Scratch encode missing for quality {attempt.quality}: {scratch_path}")
    if artifact_path.exists():
        raise _fail(f"Artifact already exists: {artifact_path}")

    temp_path = None
    try:
        artifact_path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="wb",
            prefix=".tmp-",
            suffix=artifact_path.suffix,
            dir=artifact_path.parent,
            delete=False,
        ) as f:
            temp_path = Path(f.name)
            with scratch_path.open("rb") as src:
                shutil.copyfileobj(src, f)
        # Use replace() instead of rename() for Windows compatibility
        temp_path.replace(artifact_path)
        temp_path = None
        final_size = artifact_path.stat().st_size
    except OSError as e:
        raise _fail(f"Failed to write artifact {artifact_path}: {e}") from e
    finally:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)

    if final_size != attempt.byte_size:
        raise _fail(
            f"Artifact size mismatch: wrote {final_size} bytes, expected {attempt.byte_size}"
        )

    logger.info(
        f"Wrote {artifact_path.name}: quality {attempt.quality}, "
        f"{final_size:,} bytes ({final_size / 1024 / 1024:.2f} MB)"
    )
    return StitchResult(
        final_quality=attempt.quality,
        final_byte_size=final_size,
        artifact_path=artifact_path,
        canvas_width=canvas.width,
        canvas_height=canvas.height,
        max_bytes=max_bytes,
    )
