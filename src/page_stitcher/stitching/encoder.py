"""
Module: stitching.encoder

Purpose:
    Encode the stitched canvas at a given quality and manage the
    per-request scratch directory that holds candidate encodes.

Key Functions:
    - encode_image(): Encode a PIL image to bytes at a quality
    - make_encoder(): Bind a canvas and format into an encode(quality) step

Key Classes:
    - ScratchArea: Context manager owning one request's scratch files

Dependencies:
    - PIL.Image: PNG/JPEG/WebP encoding
    - tempfile, shutil: Scratch directory lifecycle
    - page_stitcher.core.errors: PersistError for unusable scratch roots

Used By:
    - stitching.optimizer: Writes and discards candidate encodes
    - stitching.pipeline: Opens the ScratchArea for a request
"""

from __future__ import annotations

import io
import logging
import shutil
import tempfile
from functools import partial
from pathlib import Path
from typing import Callable, Optional

from PIL import Image

from page_stitcher.core.errors import PersistError

logger = logging.getLogger(__name__)

Encoder = Callable[[int], bytes]

# Palette size used for PNG at quality 100
PNG_MAX_COLORS = 256
PNG_MIN_COLORS = 2


def png_palette_size(quality: int) -> int:
    """
    Number of palette colours used to encode PNG at `quality`.

    PNG has no native quality setting, so quality scales the palette
    size of a quantized image.

    Example:
        >>> png_palette_size(100), png_palette_size(50), png_palette_size(1)
        (256, 128, 3)
    """
    colors = round(PNG_MAX_COLORS * quality / 100)
    return max(PNG_MIN_COLORS, min(PNG_MAX_COLORS, colors))


def encode_image(image: Image.Image, quality: int, image_format: str = "PNG") -> bytes:
    """
    Encode an image at a fixed quality.

    Deterministic: the same image, quality and format always produce the
    same bytes.

    Args:
        image: RGB image to encode.
        quality: Encoder quality (1-100, lower = smaller).
        image_format: "PNG", "JPEG" or "WEBP".

    Returns:
        Encoded bytes.

    Raises:
        ValueError: If the format is unsupported.
    """
    buffer = io.BytesIO()
    if image_format == "PNG":
        quantized = image.quantize(
            colors=png_palette_size(quality),
            method=Image.Quantize.MEDIANCUT,
            dither=Image.Dither.FLOYDSTEINBERG,
        )
        quantized.save(buffer, format="PNG", optimize=True)
    elif image_format == "JPEG":
        image.save(
            buffer,
            format="JPEG",
            quality=quality,
            optimize=True,
            subsampling=2,  # 4:2:0 chroma subsampling
        )
    elif image_format == "WEBP":
        image.save(buffer, format="WEBP", quality=quality, method=4)
    else:
        raise ValueError(f"Unsupported image format: {image_format!r}")
    return buffer.getvalue()


def make_encoder(image: Image.Image, image_format: str) -> Encoder:
    """Bind `image` and `image_format` into an encode(quality) step."""
    return partial(_encode_bound, image, image_format)


def _encode_bound(image: Image.Image, image_format: str, quality: int) -> bytes:
    return encode_image(image, quality, image_format)


class ScratchArea:
    """
    Per-request scratch directory for candidate encodes.

    Every file written here is removed when the area closes, whether the
    request succeeded or raised. Promote an encode by copying it out
    (see `stitching.finalizer`) before the area closes.

    Usage:
        with ScratchArea(storage.scratch_root, extension="png") as scratch:
            path = scratch.write(data, quality=90)
            ...
            scratch.discard(path)

    Attributes:
        path: The scratch directory (None until entered).
    """

    def __init__(self, root: Path, extension: str = "png", prefix: str = "stitch-") -> None:
        self._root = Path(root)
        self._extension = extension
        self._prefix = prefix
        self.path: Optional[Path] = None

    def __enter__(self) -> "ScratchArea":
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            self.path = Path(tempfile.mkdtemp(prefix=self._prefix, dir=self._root))
        except OSError as e:
            raise PersistError(
                f"Cannot create scratch area under {self._root}: {e}", self._root
            ) from e
        logger.debug(f"Opened scratch area {self.path}")
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def write(self, data: bytes, quality: int) -> Path:
        """Write one candidate encode and return its scratch path."""
        if self.path is None:
            raise RuntimeError("ScratchArea used outside its context")
        target = self.path / f"q{quality:03d}.{self._extension}"
        try:
            target.write_bytes(data)
        except OSError as e:
            raise PersistError(
                f"Cannot write scratch encode {target}: {e}",
                target,
                quality=quality,
                byte_size=len(data),
            ) from e
        return target

    def discard(self, target: Optional[Path]) -> None:
        """Remove one scratch file if it still exists."""
        if target is None:
            return
        target.unlink(missing_ok=True)

    def files(self) -> list[Path]:
        """Scratch files currently on disk."""
        if self.path is None or not self.path.exists():
            return []
        return sorted(self.path.iterdir())

    def close(self) -> None:
        """Remove the scratch directory and everything in it."""
        if self.path is None:
            return
        try:
            shutil.rmtree(self.path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove scratch area {self.path}: {e}")
        logger.debug(f"Closed scratch area {self.path}")
        self.path = None
