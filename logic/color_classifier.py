"""Reduce a pixel buffer to a handful of dominant color labels.

Pixels are bucketed into the coarse color vocabulary from
:mod:`models.taxonomy` with a few channel thresholds rather than a perceptual
color space; the labels only need to be good enough to drive a catalog filter
that is relaxed first when it over-constrains.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence, Tuple

import numpy as np

from models.taxonomy import FALLBACK_COLOR
from tools.image_decoder import DEFAULT_IMAGE_SIZE, ImageDecodeError, decode_image

logger = logging.getLogger(__name__)

GRAYSCALE_SPREAD = 30
DARK_CEILING = 80
LIGHT_FLOOR = 200
SECONDARY_CHANNEL_FLOOR = 100
DEFAULT_SAMPLE_STRIDE = 4
MAX_LABELS = 3


def color_group(r: int, g: int, b: int) -> str:
    """Map one RGB triple to its color label."""

    high = max(r, g, b)
    low = min(r, g, b)
    if high - low < GRAYSCALE_SPREAD:
        if high < DARK_CEILING:
            return "black"
        if high > LIGHT_FLOOR:
            return "white"
        return "gray"

    if r > g and r > b:
        return "orange" if g > SECONDARY_CHANNEL_FLOOR else "red"
    if g > r and g > b:
        return "teal" if b > SECONDARY_CHANNEL_FLOOR else "green"
    if b > r and b > g:
        return "purple" if r > SECONDARY_CHANNEL_FLOOR else "blue"
    # Two channels tie for the maximum.
    return FALLBACK_COLOR


def _as_pixel_rows(pixels: Sequence[Tuple[int, int, int]] | np.ndarray) -> np.ndarray:
    array = np.asarray(pixels)
    if array.size == 0:
        raise ValueError("empty pixel buffer")
    if array.ndim < 2 or array.shape[-1] < 3:
        raise ValueError(f"expected RGB pixels, got shape {array.shape}")
    if not np.issubdtype(array.dtype, np.number):
        raise ValueError(f"expected numeric pixels, got dtype {array.dtype}")
    if array.min() < 0 or array.max() > 255:
        raise ValueError("pixel intensities must be within 0-255")
    # Drop an alpha channel if one is present.
    return array.reshape(-1, array.shape[-1])[:, :3].astype(np.int16)


def count_labels(pixels: Sequence[Tuple[int, int, int]] | np.ndarray, sample_stride: int = DEFAULT_SAMPLE_STRIDE) -> Dict[str, int]:
    """Count labels over every ``sample_stride``-th pixel, in first-seen order."""

    if sample_stride < 1:
        raise ValueError("sample_stride must be at least 1")
    rows = _as_pixel_rows(pixels)[::sample_stride]
    counts: Dict[str, int] = {}
    for r, g, b in rows.tolist():
        label = color_group(r, g, b)
        counts[label] = counts.get(label, 0) + 1
    return counts


def classify(pixels: Sequence[Tuple[int, int, int]] | np.ndarray, sample_stride: int = DEFAULT_SAMPLE_STRIDE) -> List[str]:
    """Return up to three dominant color labels, most frequent first.

    Ties keep first-encountered order. A buffer that cannot be interpreted
    yields ``["neutral"]`` instead of raising.
    """

    try:
        counts = count_labels(pixels, sample_stride)
    except (ValueError, TypeError) as exc:
        logger.warning("Color classification failed, using fallback: %s", exc)
        return [FALLBACK_COLOR]

    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    labels = [label for label, _ in ranked[:MAX_LABELS]]
    logger.info("Dominant colors %s from %s sampled pixels", labels, sum(counts.values()))
    return labels


def classify_image(
    image_bytes: bytes,
    size: Tuple[int, int] = DEFAULT_IMAGE_SIZE,
    sample_stride: int = DEFAULT_SAMPLE_STRIDE,
) -> List[str]:
    """Decode and downsample ``image_bytes`` then classify its pixels."""

    try:
        pixels = decode_image(image_bytes, size=size)
    except ImageDecodeError as exc:
        logger.warning("Image decode failed, using fallback color: %s", exc)
        return [FALLBACK_COLOR]
    return classify(pixels, sample_stride)


__all__ = ["color_group", "count_labels", "classify", "classify_image", "DEFAULT_SAMPLE_STRIDE"]
