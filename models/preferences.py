"""Shopper preference vector and normalisation helpers."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple

from models.taxonomy import (
    BUDGET_CEILINGS,
    CATEGORIES,
    GENDERS,
    MATERIALS,
    OCCASIONS,
    STYLES,
    normalise_colors,
    normalize_choice,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreferenceVector:
    """Normalised matching criteria for a single request.

    Every optional field is ``None`` when the shopper did not supply it or
    supplied a value outside the vocabulary.
    """

    occasion: Optional[str] = None
    style: Optional[str] = None
    budget: Optional[float] = None
    material: Optional[str] = None
    category: Optional[str] = None
    gender: Optional[str] = None
    colors: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "occasion": self.occasion,
            "style": self.style,
            "budget": self.budget,
            "material": self.material,
            "category": self.category,
            "gender": self.gender,
            "colors": list(self.colors),
        }


def normalize_budget(value: Any) -> Optional[float]:
    """Convert a budget label or literal number into a numeric ceiling.

    ``low``/``medium``/``high`` map to fixed ceilings, numbers and numeric
    strings pass through as floats. Unrecognised labels, non-positive values
    and ``None`` resolve to ``None`` (no budget constraint), never to zero.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        ceiling = BUDGET_CEILINGS.get(text.lower())
        if ceiling is not None:
            return ceiling
        try:
            number = float(text)
        except ValueError:
            logger.info("Unrecognised budget label '%s'; applying no budget constraint", text)
            return None
    if math.isnan(number) or math.isinf(number) or number <= 0:
        return None
    return number


def build_preferences(
    *,
    occasion: Any = None,
    style: Any = None,
    budget: Any = None,
    material: Any = None,
    category: Any = None,
    gender: Any = None,
    colors: Iterable[Any] = (),
) -> PreferenceVector:
    """Normalise loose request values into a :class:`PreferenceVector`."""

    prefs = PreferenceVector(
        occasion=normalize_choice(occasion, OCCASIONS),
        style=normalize_choice(style, STYLES),
        budget=normalize_budget(budget),
        material=normalize_choice(material, MATERIALS),
        category=normalize_choice(category, CATEGORIES),
        gender=normalize_choice(gender, GENDERS),
        colors=tuple(normalise_colors(colors or ())),
    )
    dropped = [
        name
        for name, raw, value in (
            ("occasion", occasion, prefs.occasion),
            ("style", style, prefs.style),
            ("material", material, prefs.material),
            ("category", category, prefs.category),
            ("gender", gender, prefs.gender),
        )
        if raw not in (None, "") and value is None
    ]
    if dropped:
        logger.info("Ignoring unrecognised preference values for %s", dropped)
    return prefs


__all__ = ["PreferenceVector", "normalize_budget", "build_preferences"]
