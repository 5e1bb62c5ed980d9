"""
Module: stitching.optimizer

Purpose:
    Find the highest encoder quality whose output fits a byte ceiling.
    Tries the requested quality first; only if that is too large does it
    binary-search down towards the quality floor. If nothing fits, the
    floor quality is accepted anyway (oversized) rather than failing.

Key Functions:
    - find_optimal_quality(): Bounded quality search

Dependencies:
    - stitching.encoder: ScratchArea for candidate files

Used By:
    - stitching.pipeline: Fourth pipeline stage
"""

from __future__ import annotations

import logging
from typing import List, Optional

from page_stitcher.core.models import EncodingAttempt, QualitySearch

from .encoder import Encoder, ScratchArea

logger = logging.getLogger(__name__)


class _Search:
    """Runs encode attempts and keeps at most one scratch file on disk."""

    def __init__(self, encode: Encoder, scratch: ScratchArea, max_bytes: int) -> None:
        self._encode = encode
        self._scratch = scratch
        self._max_bytes = max_bytes
        self.attempts: List[EncodingAttempt] = []
        self.last: Optional[EncodingAttempt] = None

    def attempt(self, quality: int) -> EncodingAttempt:
        if self.last is not None:
            self._scratch.discard(self.last.scratch_path)

        data = self._encode(quality)
        size = len(data)
        path = self._scratch.write(data, quality)
        result = EncodingAttempt(
            quality=quality,
            byte_size=size,
            success=size <= self._max_bytes,
            scratch_path=path,
        )
        logger.info(
            f"Quality {quality}: {size:,} bytes ({result.size_mb:.2f} MB) "
            f"{'fits' if result.success else 'exceeds'} {self._max_bytes:,}"
        )
        self.attempts.append(result)
        self.last = result
        return result

    def outcome(self, accepted: EncodingAttempt) -> QualitySearch:
        return QualitySearch(accepted=accepted, attempts=tuple(self.attempts))


def find_optimal_quality(
    encode: Encoder,
    scratch: ScratchArea,
    *,
    start_quality: int,
    min_quality: int,
    max_bytes: int,
) -> QualitySearch:
    """
    Search for the highest quality whose encoding is <= max_bytes.

    Algorithm:
    1. Encode at start_quality; if it fits, stop (one attempt).
    2. Otherwise binary-search [min_quality, start_quality]. A fitting
       mid raises the floor, an oversized mid lowers the ceiling. The
       loop stops as soon as mid equals the best confirmed quality.
    3. If something fit, re-encode at the best quality unless the last
       attempt already was that quality.
    4. If nothing fit, accept min_quality regardless of size.

    Only the accepted attempt's scratch file survives; every other
    candidate is discarded as soon as it is superseded.

    Args:
        encode: encode(quality) -> bytes step.
        scratch: Open ScratchArea receiving candidate files.
        start_quality: First quality tried (Q0).
        min_quality: Quality floor (Qmin), <= start_quality.
        max_bytes: Byte ceiling.

    Returns:
        QualitySearch with the accepted attempt and the full trace.

    Raises:
        ValueError: If min_quality > start_quality or max_bytes <= 0.

    Example:
        >>> search = find_optimal_quality(encode, scratch,
        ...     start_quality=90, min_quality=50, max_bytes=10 * 1024 * 1024)
        >>> search.accepted.quality, search.attempt_count
        (83, 6)
    """
    if min_quality > start_quality:
        raise ValueError(f"min_quality must be <= start_quality: {min_quality} > {start_quality}")
    if max_bytes <= 0:
        raise ValueError(f"max_bytes must be positive: {max_bytes}")

    search = _Search(encode, scratch, max_bytes)

    try:
        first = search.attempt(start_quality)
        if first.success:
            logger.info(f"Start quality {start_quality} is within the size limit")
            return search.outcome(first)

        low = min_quality
        high = start_quality
        best = min_quality
        best_size = 0
        found = False

        while low <= high:
            mid = (low + high) // 2
            if mid == best:
                break

            result = search.attempt(mid)
            if result.success:
                best = mid
                best_size = result.byte_size
                found = True
                low = mid + 1
            else:
                high = mid - 1

        if found:
            last = search.last
            if last is not None and last.quality == best:
                accepted = last
            else:
                accepted = search.attempt(best)
            logger.info(
                f"Found optimal quality {best} "
                f"({best_size:,} bytes, {best_size / 1024 / 1024:.2f} MB)"
            )
            return search.outcome(accepted)

        last = search.last
        if last is not None and last.quality == min_quality:
            accepted = last
        else:
            accepted = search.attempt(min_quality)
        logger.warning(
            f"No quality in [{min_quality}, {start_quality}] fits {max_bytes:,} bytes; "
            f"accepting minimum quality {min_quality} at {accepted.byte_size:,} bytes"
        )
        return search.outcome(accepted)
    except BaseException:
        if search.last is not None:
            scratch.discard(search.last.scratch_path)
        raise
