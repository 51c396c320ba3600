"""Deterministic scoring and ranking of catalog candidates."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from matcher_app.config import ScoringWeights
from models.catalog_item import CatalogItem
from models.complementarity import complements_of
from models.preferences import PreferenceVector

MAX_SCORE = 100.0
DEFAULT_RESULT_LIMIT = 12

ComponentRule = Callable[[CatalogItem, PreferenceVector, ScoringWeights], Optional[float]]


@dataclass(frozen=True)
class ScoredItem:
    """A catalog item with its total score and per-component contributions.

    Components whose preference was absent are missing from ``breakdown``.
    """

    item: CatalogItem
    score: float
    breakdown: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        return {**self.item.to_dict(), "score": self.score, "score_breakdown": dict(self.breakdown)}


def _clamp(value: float, ceiling: float) -> float:
    return max(0.0, min(ceiling, value))


def color_component(item: CatalogItem, prefs: PreferenceVector, weights: ScoringWeights) -> Optional[float]:
    if not prefs.colors:
        return None
    wanted = set(prefs.colors) | complements_of(prefs.colors)
    matches = {color for color in item.colors if color in wanted}
    # Not capped at the weight: extra complementary matches keep adding; score_item clamps the total.
    return len(matches) / max(len(prefs.colors), 1) * weights.color


def style_component(item: CatalogItem, prefs: PreferenceVector, weights: ScoringWeights) -> Optional[float]:
    if not prefs.style:
        return None
    return weights.style if prefs.style in item.styles else 0.0


def occasion_component(item: CatalogItem, prefs: PreferenceVector, weights: ScoringWeights) -> Optional[float]:
    if not prefs.occasion:
        return None
    return weights.occasion if prefs.occasion in item.occasions else 0.0


def material_component(item: CatalogItem, prefs: PreferenceVector, weights: ScoringWeights) -> Optional[float]:
    if not prefs.material:
        return None
    return weights.material if prefs.material in item.materials else 0.0


def category_component(item: CatalogItem, prefs: PreferenceVector, weights: ScoringWeights) -> Optional[float]:
    if not prefs.category:
        return None
    return weights.category if item.category == prefs.category else 0.0


def gender_component(item: CatalogItem, prefs: PreferenceVector, weights: ScoringWeights) -> Optional[float]:
    if not prefs.gender:
        return None
    if item.gender == prefs.gender:
        return weights.gender
    if item.gender == "unisex":
        return min(weights.unisex_partial_credit, weights.gender)
    return 0.0


def price_component(item: CatalogItem, prefs: PreferenceVector, weights: ScoringWeights) -> Optional[float]:
    budget = prefs.budget if prefs.budget else weights.default_budget
    ratio = item.price / budget
    for ceiling, points in weights.price_thresholds:
        if ratio <= ceiling:
            return min(points, weights.price)
    return 0.0


# Evaluation order matches the breakdown order shown to callers.
COMPONENT_RULES: Mapping[str, ComponentRule] = MappingProxyType(
    {
        "color": color_component,
        "style": style_component,
        "occasion": occasion_component,
        "material": material_component,
        "category": category_component,
        "gender": gender_component,
        "price": price_component,
    }
)


def score_breakdown(
    item: CatalogItem, prefs: PreferenceVector, weights: ScoringWeights | None = None
) -> Dict[str, float]:
    """Return the contribution of every component that applies to ``prefs``."""

    weights = weights or ScoringWeights()
    breakdown: Dict[str, float] = {}
    for name, rule in COMPONENT_RULES.items():
        contribution = rule(item, prefs, weights)
        if contribution is not None:
            breakdown[name] = round(contribution, 4)
    return breakdown


def score_item(item: CatalogItem, prefs: PreferenceVector, weights: ScoringWeights | None = None) -> ScoredItem:
    """Score one candidate; the total is clamped to 0-100."""

    breakdown = score_breakdown(item, prefs, weights)
    total = _clamp(sum(breakdown.values()), MAX_SCORE)
    return ScoredItem(item=item, score=round(total, 4), breakdown=breakdown)


def rank_items(
    items: Sequence[CatalogItem],
    prefs: PreferenceVector,
    weights: ScoringWeights | None = None,
    limit: int = DEFAULT_RESULT_LIMIT,
) -> List[ScoredItem]:
    """Score ``items`` and keep the ``limit`` best.

    The sort is stable, so equal scores keep the catalog's newest-first order.
    """

    scored = [score_item(item, prefs, weights) for item in items]
    scored.sort(key=lambda entry: entry.score, reverse=True)
    return scored[:limit]


__all__ = [
    "ScoredItem",
    "COMPONENT_RULES",
    "score_breakdown",
    "score_item",
    "rank_items",
    "color_component",
    "style_component",
    "occasion_component",
    "material_component",
    "category_component",
    "gender_component",
    "price_component",
    "MAX_SCORE",
    "DEFAULT_RESULT_LIMIT",
]
