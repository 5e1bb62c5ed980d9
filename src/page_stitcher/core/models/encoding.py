"""
Module: encoding

Purpose:
    Encoding result models - one encode attempt at a given quality,
    the optimizer's search trace, and the final caller-facing result.

Key Classes:
    - EncodingAttempt: Quality, byte size and scratch file of one encode
    - QualitySearch: Accepted attempt plus every attempt made
    - StitchResult: Final artifact metadata returned to the caller

Used By:
    - stitching.optimizer: Produces EncodingAttempt / QualitySearch
    - stitching.finalizer: Produces StitchResult
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple


@dataclass(frozen=True, slots=True)
class EncodingAttempt:
    """
    One encode of the canvas at a fixed quality.

    Attributes:
        quality: Integer encoder quality used.
        byte_size: Size of the encoded bytes.
        success: True if byte_size <= the configured ceiling.
        scratch_path: Scratch file holding the bytes, None once discarded.
    """

    quality: int
    byte_size: int
    success: bool
    scratch_path: Optional[Path] = None

    @property
    def size_mb(self) -> float:
        return self.byte_size / 1024 / 1024


@dataclass(frozen=True)
class QualitySearch:
    """
    Outcome of the quality search.

    Attributes:
        accepted: Attempt chosen for promotion. Its scratch file is the
            only one still on disk.
        attempts: Every encode performed, in order (including the
            accepted one).

    Example:
        >>> search.accepted.quality
        72
        >>> [a.quality for a in search.attempts]
        [90, 70, 80, 75, 72]
    """

    accepted: EncodingAttempt
    attempts: Tuple[EncodingAttempt, ...]

    @property
    def attempt_count(self) -> int:
        return len(self.attempts)

    @property
    def exhausted(self) -> bool:
        """True if no quality met the ceiling and the floor was accepted anyway."""
        return not self.accepted.success


@dataclass(frozen=True)
class StitchResult:
    """
    Final stitched artifact (immutable).

    Attributes:
        final_quality: Quality of the persisted encoding.
        final_byte_size: Size of the persisted artifact in bytes.
        artifact_path: Where the artifact was written.
        canvas_width: Width of the stitched canvas.
        canvas_height: Height of the stitched canvas.
        max_bytes: Ceiling the search was run against.

    Example:
        >>> result = stitch_pages(sources)
        >>> print(f"q={result.final_quality} {result.size_mb:.2f}MB")
    """

    final_quality: int
    final_byte_size: int
    artifact_path: Path
    canvas_width: int
    canvas_height: int
    max_bytes: int

    @property
    def within_limit(self) -> bool:
        """False when the floor quality was accepted despite being oversized."""
        return self.final_byte_size <= self.max_bytes

    @property
    def size_mb(self) -> float:
        return self.final_byte_size / 1024 / 1024

    def summary(self) -> str:
        status = "ok" if self.within_limit else "OVER LIMIT"
        return (
            f"Output:  {self.artifact_path}\n"
            f"Canvas:  {self.canvas_width}x{self.canvas_height}\n"
            f"Quality: {self.final_quality}\n"
            f"Size:    {self.final_byte_size:,} bytes ({self.size_mb:.2f} MB, {status})"
        )
