"""
Module: core.errors

Purpose:
    Error taxonomy for the stitching pipeline. Input errors, composition
    errors and persistence errors are fatal to a request; search
    exhaustion is not an error and has no class here.

Key Classes:
    - StitchError: Base class for all pipeline failures
    - NotFoundError: A page location does not resolve to readable bytes
    - DecodeError: Bytes are not a decodable raster image
    - CompositionError: Geometry/placement mismatch
    - PersistError: Final artifact could not be written

Used By:
    - stitching.loader, stitching.compositor, stitching.finalizer
    - cli: maps StitchError to exit code 1
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class StitchError(Exception):
    """Base error for the stitching pipeline."""
    pass


class NotFoundError(StitchError):
    """Page image location does not resolve to readable bytes."""

    def __init__(self, location: Path, detail: str = "") -> None:
        self.location = Path(location)
        message = f"Image not found: {self.location}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class DecodeError(StitchError):
    """Bytes at a location are not a decodable raster image."""

    def __init__(self, location: Path, detail: str = "") -> None:
        self.location = Path(location)
        message = f"Cannot decode image: {self.location}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class CompositionError(StitchError):
    """Page placement does not fit the computed canvas."""

    def __init__(self, reason: str, location: Optional[Path] = None) -> None:
        self.reason = reason
        self.location = Path(location) if location is not None else None
        super().__init__(reason)


class PersistError(StitchError):
    """
    Final artifact write failed.

    Attributes:
        reason: Human-readable cause.
        path: Artifact path that could not be written.
        quality: Quality of the encoding being persisted.
        byte_size: Size of the encoding being persisted.
    """

    def __init__(
        self,
        reason: str,
        path: Optional[Path] = None,
        *,
        quality: Optional[int] = None,
        byte_size: Optional[int] = None,
    ) -> None:
        self.reason = reason
        self.path = Path(path) if path is not None else None
        self.quality = quality
        self.byte_size = byte_size
        super().__init__(reason)
