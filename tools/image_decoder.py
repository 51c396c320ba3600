"""Decode uploaded image bytes into a fixed-size RGB pixel buffer."""

from __future__ import annotations

import io
import logging
from typing import Tuple

import numpy as np
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_SIZE: Tuple[int, int] = (100, 100)


class ImageDecodeError(ValueError):
    """Raised when the provided bytes cannot be decoded as an image."""


def decode_image(image_bytes: bytes, size: Tuple[int, int] = DEFAULT_IMAGE_SIZE) -> np.ndarray:
    """Decode ``image_bytes`` and resample to ``size``.

    Resampling always happens so that classification cost is bounded and the
    pixel count is the same whatever the upload resolution.

    Returns:
        A ``(height, width, 3)`` ``uint8`` array.

    Raises:
        ImageDecodeError: If the payload is empty or not a readable image.
    """

    if not image_bytes:
        raise ImageDecodeError("Empty image payload")
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            img = img.convert("RGB")
            img = img.resize(size)
            pixels = np.asarray(img, dtype=np.uint8)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise ImageDecodeError(f"Unable to decode image: {exc}") from exc

    logger.debug("Decoded image to %s pixel buffer", pixels.shape)
    return pixels


__all__ = ["DEFAULT_IMAGE_SIZE", "ImageDecodeError", "decode_image"]
