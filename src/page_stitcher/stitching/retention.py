"""
Module: stitching.retention

Purpose:
    Sweep expired artifacts out of the output root so finished long
    images don't accumulate. Only files named like our own artifacts
    (stitched-<id>.<ext>) are touched, so a shared output directory keeps
    everything else. Best effort: failures are logged and never abort the
    request that triggered the sweep.

Key Functions:
    - sweep_expired_artifacts(): Delete artifact files older than a cutoff
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import List, Optional

from page_stitcher.stitching.config import SUPPORTED_FORMATS
from page_stitcher.stitching.finalizer import ARTIFACT_PREFIX

logger = logging.getLogger(__name__)

ARTIFACT_SUFFIXES = frozenset(f".{ext}" for ext in SUPPORTED_FORMATS.values())


def is_artifact_name(name: str) -> bool:
    """True for file names the finalizer produces ('stitched-<id>.png')."""
    return name.startswith(ARTIFACT_PREFIX) and Path(name).suffix.lower() in ARTIFACT_SUFFIXES


def sweep_expired_artifacts(
    output_root: Path,
    max_age_seconds: float,
    *,
    now: Optional[float] = None,
) -> List[Path]:
    """
    Delete artifacts in `output_root` older than `max_age_seconds`.

    Only top-level files with an artifact name are considered. Other
    files and subdirectories are left alone.

    Args:
        output_root: Directory holding finished artifacts.
        max_age_seconds: Files whose mtime is older than this are removed.
        now: Reference time (epoch seconds). Defaults to time.time().

    Returns:
        Paths that were removed.
    """
    output_root = Path(output_root)
    if not output_root.is_dir():
        return []

    cutoff = (time.time() if now is None else now) - max_age_seconds
    removed: List[Path] = []

    try:
        entries = list(output_root.iterdir())
    except OSError as e:
        logger.warning(f"Could not list output directory {output_root}: {e}")
        return removed

    for entry in entries:
        if not is_artifact_name(entry.name):
            continue
        try:
            if not entry.is_file() or entry.stat().st_mtime >= cutoff:
                continue
            entry.unlink()
        except OSError as e:
            logger.warning(f"Could not remove expired artifact {entry}: {e}")
            continue
        logger.info(f"Cleaning up old output file: {entry}")
        removed.append(entry)

    return removed
