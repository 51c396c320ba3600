"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.catalog_item import CatalogItem, from_raw_metadata
from models.complementarity import COMPLEMENTARY_COLORS, complements_of
from models.preferences import PreferenceVector, build_preferences, normalize_budget

__all__ = [
    "CatalogItem",
    "from_raw_metadata",
    "COMPLEMENTARY_COLORS",
    "complements_of",
    "PreferenceVector",
    "build_preferences",
    "normalize_budget",
]
