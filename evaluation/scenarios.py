"""Evaluation scenarios exercising colors, relaxation, and budget patterns."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple


@dataclass
class EvaluationScenario:
    name: str
    description: str
    preferences: Dict[str, object]
    catalog_items: List[Dict[str, object]]
    expectations: Dict[str, object]
    # Solid fill used to synthesise the shopper photo; ``None`` means no image.
    image_rgb: Optional[Tuple[int, int, int]] = None


def _catalog_fixtures() -> List[Dict[str, object]]:
    return [
        {
            "item_id": "gold_kundan_necklace",
            "name": "Kundan Bridal Necklace",
            "price": 42000,
            "category": "necklace",
            "styles": ["traditional"],
            "occasions": ["wedding", "festival"],
            "materials": ["gold", "kundan"],
            "colors": ["gold", "red"],
            "gender": "women",
            "createdAt": "2024-03-01T10:00:00+00:00",
        },
        {
            "item_id": "silver_minimal_ring",
            "name": "Minimal Silver Band",
            "price": 3500,
            "category": "ring",
            "styles": ["minimalist", "modern"],
            "occasions": ["daily", "office"],
            "materials": ["silver"],
            "colors": ["silver"],
            "gender": "unisex",
            "createdAt": "2024-03-05T10:00:00+00:00",
        },
        {
            "item_id": "emerald_drop_earrings",
            "name": "Emerald Drop Earrings",
            "price": 28000,
            "category": "earrings",
            "styles": ["fusion"],
            "occasions": ["party", "wedding"],
            "materials": ["emerald", "gold"],
            "colors": ["green", "gold"],
            "gender": "women",
            "createdAt": "2024-02-20T10:00:00+00:00",
        },
        {
            "item_id": "sapphire_cuff",
            "name": "Sapphire Cuff",
            "price": 65000,
            "category": "bracelet",
            "styles": ["modern"],
            "occasions": ["party"],
            "materials": ["sapphire", "white-gold"],
            "colors": ["blue", "silver"],
            "gender": "unisex",
            "createdAt": "2024-01-15T10:00:00+00:00",
        },
        {
            "item_id": "pearl_office_studs",
            "name": "Pearl Office Studs",
            "price": 8000,
            "category": "earrings",
            "styles": ["minimalist"],
            "occasions": ["office", "daily"],
            "materials": ["pearl", "silver"],
            "colors": ["white"],
            "gender": "women",
            "createdAt": "2024-02-01T10:00:00+00:00",
        },
        {
            "item_id": "sold_out_polki_set",
            "name": "Polki Heirloom Set",
            "price": 90000,
            "category": "set",
            "styles": ["traditional"],
            "occasions": ["wedding"],
            "materials": ["polki", "gold"],
            "colors": ["gold", "red"],
            "gender": "women",
            "inStock": False,
            "createdAt": "2024-03-10T10:00:00+00:00",
        },
    ]


SCENARIOS: List[EvaluationScenario] = [
    EvaluationScenario(
        name="red_outfit_traditional_wedding",
        description="A red outfit should pull gold-and-red bridal pieces to the top.",
        preferences={"occasion": "wedding", "style": "traditional", "budget": "medium", "gender": "women"},
        catalog_items=_catalog_fixtures(),
        image_rgb=(200, 30, 30),
        expectations={
            "top_item": "gold_kundan_necklace",
            "dominant_colors": ["red"],
            "max_attempts": 1,
            "excluded": ["sold_out_polki_set"],
        },
    ),
    EvaluationScenario(
        name="office_minimalist_low_budget",
        description="Preference-only request with a tight budget keeps to affordable office wear.",
        preferences={"occasion": "office", "style": "minimalist", "budget": "low"},
        catalog_items=_catalog_fixtures(),
        expectations={
            "top_item": "silver_minimal_ring",
            "max_price": 10000,
            "min_results": 2,
            "max_attempts": 1,
        },
    ),
    EvaluationScenario(
        name="overconstrained_request_relaxes",
        description="No piece matches every preference, so soft clauses are relaxed in order.",
        preferences={
            "occasion": "festival",
            "style": "minimalist",
            "material": "platinum",
            "category": "anklet",
            "budget": 30000,
        },
        catalog_items=_catalog_fixtures(),
        expectations={"min_results": 1, "min_attempts": 2, "max_price": 30000},
    ),
    EvaluationScenario(
        name="budget_excludes_everything",
        description="A ceiling below every price exhausts relaxation and returns nothing.",
        preferences={"style": "modern", "budget": 100},
        catalog_items=_catalog_fixtures(),
        expectations={"min_results": 0, "max_results": 0, "attempts": 2},
    ),
]


__all__ = ["EvaluationScenario", "SCENARIOS"]
