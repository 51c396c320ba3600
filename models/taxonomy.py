"""Canonical taxonomy definitions for catalog items and shopper preferences.

This module centralises the fixed vocabularies shared by the catalog, the
preference normaliser and the matching engine. Every vocabulary is a tuple so
that no caller can grow it at runtime; changing the color vocabulary requires
bumping :data:`COLOR_VOCABULARY_VERSION`.
"""

from types import MappingProxyType
from typing import Any, Iterable, List, Mapping, Optional, Tuple

COLOR_VOCABULARY_VERSION = 1

COLOR_LABELS: Tuple[str, ...] = (
    "black",
    "white",
    "gray",
    "red",
    "orange",
    "green",
    "teal",
    "blue",
    "purple",
    "neutral",
    "gold",
    "silver",
    "pink",
    "yellow",
)
FALLBACK_COLOR = "neutral"

OCCASIONS: Tuple[str, ...] = ("daily", "office", "party", "wedding", "festival")
STYLES: Tuple[str, ...] = ("traditional", "modern", "fusion", "minimalist")
CATEGORIES: Tuple[str, ...] = ("necklace", "earrings", "bracelet", "ring", "anklet", "set")
GENDERS: Tuple[str, ...] = ("men", "women", "unisex")
BINARY_GENDERS: Tuple[str, ...] = ("men", "women")
MATERIALS: Tuple[str, ...] = (
    "gold",
    "silver",
    "platinum",
    "diamond",
    "pearl",
    "gemstone",
    "artificial",
    "kundan",
    "meenakari",
    "polki",
    "jadau",
    "brass",
    "copper",
    "ruby",
    "emerald",
    "sapphire",
    "white-gold",
    "rose-gold",
    "antique-gold",
)

BUDGET_CEILINGS: Mapping[str, float] = MappingProxyType(
    {
        "low": 10000.0,
        "medium": 50000.0,
        "high": 100000.0,
    }
)

COLOR_MAP: Mapping[str, str] = MappingProxyType(
    {
        "grey": "gray",
        "golden": "gold",
        "yellow gold": "gold",
        "silvery": "silver",
        "rose": "pink",
        "maroon": "red",
        "crimson": "red",
        "navy": "blue",
        "turquoise": "teal",
        "violet": "purple",
    }
)


def _normalize_key(value: Any) -> str:
    """Normalise a free-form value into a taxonomy key."""

    return str(value).strip().lower().replace("_", "-")


def normalize_choice(value: Any, allowed: Tuple[str, ...]) -> Optional[str]:
    """Return the canonical member of ``allowed`` or ``None`` when unknown."""

    if value is None:
        return None
    key = _normalize_key(value).replace(" ", "-")
    return key if key in allowed else None


def validate_choice(value: Any, allowed: Tuple[str, ...], field_name: str) -> str:
    """Validate and normalise a value against a vocabulary.

    Raises a :class:`ValueError` if the value is not part of ``allowed``.
    """

    normalised = normalize_choice(value, allowed)
    if normalised is None:
        raise ValueError(f"Unsupported {field_name} '{value}'. Allowed: {sorted(allowed)}")
    return normalised


def normalize_color_name(raw_string: str) -> str:
    """Map a raw color string to a canonical color label when one is known."""

    key = str(raw_string).strip().lower()
    return COLOR_MAP.get(key, key)


def normalise_tags(values: Iterable[Any], allowed: Tuple[str, ...]) -> List[str]:
    """Normalise and deduplicate tags against an allowed set, preserving order."""

    normalised = []
    seen = set()
    for value in values:
        key = normalize_choice(value, allowed)
        if key is not None and key not in seen:
            normalised.append(key)
            seen.add(key)
    return normalised


def normalise_colors(values: Iterable[Any]) -> List[str]:
    """Map raw color names onto the color vocabulary, dropping unknown labels."""

    return normalise_tags((normalize_color_name(value) for value in values if value), COLOR_LABELS)


__all__ = [
    "COLOR_VOCABULARY_VERSION",
    "COLOR_LABELS",
    "FALLBACK_COLOR",
    "OCCASIONS",
    "STYLES",
    "CATEGORIES",
    "GENDERS",
    "BINARY_GENDERS",
    "MATERIALS",
    "BUDGET_CEILINGS",
    "normalize_choice",
    "validate_choice",
    "normalize_color_name",
    "normalise_tags",
    "normalise_colors",
]
