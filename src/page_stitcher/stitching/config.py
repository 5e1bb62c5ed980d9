"""
Module: stitching.config

Purpose:
    Configuration dataclasses for the stitching pipeline. Provides
    immutable settings for the quality search and for where scratch
    encodes and final artifacts are written.

Key Classes:
    - StitchConfig: Quality range, byte ceiling and output format
    - StorageConfig: Scratch and output roots, resolved once per process

Dependencies:
    - dataclasses: For frozen dataclass support
    - page_stitcher.core.errors: PersistError for unusable roots

Used By:
    - stitching.pipeline: Uses both configs for a request
    - cli: Builds StitchConfig from command-line options
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from page_stitcher.core.errors import PersistError

# Request defaults
DEFAULT_START_QUALITY = 90
DEFAULT_MIN_QUALITY = 50
DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
DEFAULT_RETENTION_SECONDS = 2 * 60 * 60  # 2 hours

SUPPORTED_FORMATS = {
    "PNG": "png",
    "JPEG": "jpg",
    "WEBP": "webp",
}

ENV_SCRATCH_DIR = "PAGE_STITCHER_SCRATCH_DIR"
ENV_OUTPUT_DIR = "PAGE_STITCHER_OUTPUT_DIR"
ENV_SERVERLESS = "PAGE_STITCHER_SERVERLESS"


@dataclass(frozen=True)
class StitchConfig:
    """
    Configuration for one stitch request (immutable).

    Attributes:
        start_quality: First quality tried (1-100). Defaults to 90.
        min_quality: Hard quality floor (1-100). Defaults to 50.
        max_bytes: Byte ceiling for the encoded artifact. Defaults to 10 MB.
        image_format: "PNG", "JPEG" or "WEBP". Defaults to "PNG".
        load_workers: Threads for metadata loading (0 = sequential).
        retention_seconds: Age after which old artifacts are swept from
            the output root. None disables the sweep.

    Example:
        >>> config = StitchConfig(start_quality=85, max_bytes=4 * 1024 * 1024)
        >>> config.extension
        'png'
    """

    start_quality: int = DEFAULT_START_QUALITY
    min_quality: int = DEFAULT_MIN_QUALITY
    max_bytes: int = DEFAULT_MAX_BYTES
    image_format: str = "PNG"
    load_workers: int = 0
    retention_seconds: Optional[int] = DEFAULT_RETENTION_SECONDS

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        for name in ("start_quality", "min_quality"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValueError(f"{name} must be an integer: {value!r}")
            if not 1 <= value <= 100:
                raise ValueError(f"{name} must be in 1..100: {value}")
        if self.min_quality > self.start_quality:
            raise ValueError(
                f"min_quality must be <= start_quality: "
                f"{self.min_quality} > {self.start_quality}"
            )
        if self.max_bytes <= 0:
            raise ValueError(f"max_bytes must be positive: {self.max_bytes}")
        if self.load_workers < 0:
            raise ValueError(f"load_workers must be non-negative: {self.load_workers}")
        if self.retention_seconds is not None and self.retention_seconds < 0:
            raise ValueError(f"retention_seconds must be non-negative: {self.retention_seconds}")

        image_format = str(self.image_format).upper()
        if image_format == "JPG":
            image_format = "JPEG"
        if image_format not in SUPPORTED_FORMATS:
            raise ValueError(
                f"image_format must be one of {sorted(SUPPORTED_FORMATS)}: {self.image_format!r}"
            )
        object.__setattr__(self, "image_format", image_format)

    @property
    def extension(self) -> str:
        """File extension for artifacts in this format."""
        return SUPPORTED_FORMATS[self.image_format]


@dataclass(frozen=True)
class StorageConfig:
    """
    Filesystem roots for scratch encodes and final artifacts.

    Resolve once at process start with `from_env()` and pass the result
    into the pipeline.

    Attributes:
        scratch_root: Parent of per-request scratch directories.
        output_root: Directory holding finished artifacts.
    """

    scratch_root: Path
    output_root: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "scratch_root", Path(self.scratch_root))
        object.__setattr__(self, "output_root", Path(self.output_root))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "StorageConfig":
        """
        Resolve storage roots from the environment.

        Explicit PAGE_STITCHER_SCRATCH_DIR / PAGE_STITCHER_OUTPUT_DIR win.
        Otherwise serverless deployments (PAGE_STITCHER_SERVERLESS set)
        use /tmp, and everything else uses the system temp directory for
        scratch and ./output for artifacts.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            StorageConfig with absolute roots.
        """
        env = os.environ if environ is None else environ

        if env.get(ENV_SERVERLESS):
            default_scratch = Path("/tmp") / "page_stitcher"
            default_output = Path("/tmp") / "output"
        else:
            default_scratch = Path(tempfile.gettempdir()) / "page_stitcher"
            default_output = Path.cwd() / "output"

        scratch = env.get(ENV_SCRATCH_DIR) or default_scratch
        output = env.get(ENV_OUTPUT_DIR) or default_output
        return cls(
            scratch_root=Path(scratch).expanduser().resolve(),
            output_root=Path(output).expanduser().resolve(),
        )

    def ensure_dirs(self) -> None:
        """
        Create both roots if they don't exist.

        Raises:
            PersistError: If a root cannot be created (e.g. a parent is a
                regular file or is not writable).
        """
        for root in (self.scratch_root, self.output_root):
            try:
                root.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise PersistError(f"Cannot create directory {root}: {e}", root) from e
