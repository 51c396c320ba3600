"""End-to-end matching pipeline: image colors, relaxed search, ranking."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from logic.catalog_filter import build_filter
from logic.color_classifier import classify_image
from logic.match_scoring import ScoredItem, rank_items
from logic.relaxation_search import relaxed_search
from matcher_app.config import MatcherConfig
from matcher_app.logging_config import get_logger, log_event
from models.preferences import PreferenceVector, build_preferences
from tools.catalog_store import CatalogStore

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class RecommendationResult:
    dominant_colors: List[str]
    recommendations: List[ScoredItem]
    preferences: PreferenceVector
    diagnostics: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dominant_colors": list(self.dominant_colors),
            "recommendations": [entry.to_dict() for entry in self.recommendations],
            "preferences": self.preferences.to_dict(),
            "diagnostics": dict(self.diagnostics),
        }


def recommend(
    catalog: CatalogStore,
    *,
    image: Optional[bytes] = None,
    occasion: Any = None,
    style: Any = None,
    budget: Any = None,
    material: Any = None,
    category: Any = None,
    gender: Any = None,
    config: MatcherConfig | None = None,
) -> RecommendationResult:
    """Match catalog items to the shopper's preferences and optional photo.

    Image problems never fail the request (the colors degrade to
    ``["neutral"]``); catalog failures propagate as ``CatalogQueryError``.
    """

    config = config or MatcherConfig()
    dominant_colors: List[str] = []
    if image is not None:
        dominant_colors = classify_image(image, size=config.image_size, sample_stride=config.sample_stride)

    prefs = build_preferences(
        occasion=occasion,
        style=style,
        budget=budget,
        material=material,
        category=category,
        gender=gender,
        colors=dominant_colors,
    )
    catalog_filter = build_filter(prefs)
    log_event(
        LOGGER,
        logging.INFO,
        "recommendation_started",
        preferences=prefs.to_dict(),
        catalog_filter=catalog_filter.describe(),
    )

    search = relaxed_search(catalog_filter, catalog, limit=config.query_limit)
    ranked = rank_items(search.items, prefs, config.weights, limit=config.result_limit)

    log_event(
        LOGGER,
        logging.INFO,
        "recommendation_completed",
        attempts=search.attempt_count,
        relaxed=search.relaxed,
        candidate_count=len(search.items),
        returned=len(ranked),
        top=[{"item_id": entry.item.item_id, "score": entry.score} for entry in ranked[:3]],
    )
    diagnostics = {
        "attempts": search.attempts,
        "relaxed_clauses": search.relaxed,
        "applied_filter": search.applied_filter.describe(),
        "candidate_count": len(search.items),
    }
    return RecommendationResult(
        dominant_colors=dominant_colors,
        recommendations=ranked,
        preferences=prefs,
        diagnostics=diagnostics,
    )


__all__ = ["RecommendationResult", "recommend"]
