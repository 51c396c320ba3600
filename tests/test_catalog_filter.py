"""Catalog filter construction and relaxation search tests."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.catalog_filter import (
    COLOR,
    GENDER,
    IN_STOCK,
    MATERIAL,
    OCCASION,
    PRICE,
    STYLE,
    build_filter,
    relaxation_snapshots,
)
from logic.relaxation_search import CatalogQueryError, relaxed_search
from models.catalog_item import CatalogItem
from models.preferences import PreferenceVector, build_preferences
from tools.catalog_store import InMemoryCatalogStore


def _item(item_id: str, **overrides) -> CatalogItem:
    fields = {
        "item_id": item_id,
        "name": item_id.replace("_", " ").title(),
        "price": 20000,
        "category": "necklace",
        "styles": ["modern"],
        "occasions": ["daily"],
        "materials": ["gold"],
        "colors": ["silver"],
        "gender": "unisex",
    }
    fields.update(overrides)
    return CatalogItem(**fields)


class _RecordingCatalog(InMemoryCatalogStore):
    def __init__(self, items=()) -> None:
        super().__init__(items)
        self.calls: List[tuple] = []

    def query(self, catalog_filter, limit=20):
        self.calls.append(catalog_filter.kinds)
        return super().query(catalog_filter, limit=limit)


class _BrokenCatalog(InMemoryCatalogStore):
    def __init__(self) -> None:
        super().__init__()
        self.calls = 0

    def query(self, catalog_filter, limit=20):
        self.calls += 1
        raise ConnectionError("catalog offline")


def test_empty_preferences_only_filter_on_stock() -> None:
    catalog_filter = build_filter(PreferenceVector())
    assert catalog_filter.kinds == (IN_STOCK,)
    assert catalog_filter.describe() == {
        IN_STOCK: {"attribute": "in_stock", "operator": "eq", "value": True}
    }


def test_full_preferences_build_every_clause() -> None:
    prefs = build_preferences(
        occasion="Wedding",
        style="traditional",
        budget="low",
        material="gold",
        category="necklace",
        gender="women",
        colors=["red"],
    )
    catalog_filter = build_filter(prefs)
    assert set(catalog_filter.kinds) == {IN_STOCK, PRICE, STYLE, OCCASION, "category", MATERIAL, GENDER, COLOR}
    assert catalog_filter.get(PRICE).value == 10000
    assert catalog_filter.get(GENDER).value == ("women", "unisex")
    direct, complements = catalog_filter.get(COLOR).value
    assert direct == frozenset({"red"})
    assert complements == frozenset({"gold", "green", "white"})


def test_unisex_gender_adds_no_clause() -> None:
    catalog_filter = build_filter(build_preferences(gender="unisex"))
    assert not catalog_filter.has(GENDER)


def test_color_clause_matches_direct_or_complement() -> None:
    catalog_filter = build_filter(build_preferences(colors=["red"]))
    assert catalog_filter.matches(_item("a", colors=["gold"]))
    assert catalog_filter.matches(_item("b", colors=["red", "black"]))
    assert not catalog_filter.matches(_item("c", colors=["blue"]))
    assert not catalog_filter.matches(_item("d", colors=["red"], in_stock=False))


def test_hard_clauses_cannot_be_relaxed() -> None:
    catalog_filter = build_filter(build_preferences(budget=5000, style="modern"))
    with pytest.raises(ValueError):
        catalog_filter.without(PRICE)
    with pytest.raises(ValueError):
        catalog_filter.without(IN_STOCK)
    relaxed = catalog_filter.without(STYLE)
    assert relaxed.kinds == (IN_STOCK, PRICE)
    assert catalog_filter.has(STYLE)


def test_snapshots_follow_relaxation_order_and_skip_absent_clauses() -> None:
    prefs = build_preferences(style="modern", material="gold", gender="men", colors=["blue"], budget=1000)
    snapshots = relaxation_snapshots(build_filter(prefs))
    assert [dropped for dropped, _ in snapshots] == [None, COLOR, MATERIAL, STYLE, GENDER]
    assert snapshots[-1][1].kinds == (IN_STOCK, PRICE)


def test_relaxation_stops_after_dropping_color() -> None:
    catalog = _RecordingCatalog([_item("silver_piece", colors=["silver"])])
    prefs = build_preferences(style="modern", occasion="daily", material="gold", colors=["red"])
    result = relaxed_search(build_filter(prefs), catalog)

    assert [item.item_id for item in result.items] == ["silver_piece"]
    assert result.attempt_count == 2
    assert len(catalog.calls) == 2
    assert result.relaxed == [COLOR]
    assert not result.applied_filter.has(COLOR)


def test_relaxation_returns_empty_when_price_excludes_everything() -> None:
    catalog = _RecordingCatalog([_item("pricey", price=90000)])
    prefs = build_preferences(style="traditional", occasion="wedding", budget="low")
    result = relaxed_search(build_filter(prefs), catalog)

    assert result.items == []
    assert result.attempt_count == 3
    assert result.applied_filter.kinds == (IN_STOCK, PRICE)


def test_query_failure_is_not_retried() -> None:
    catalog = _BrokenCatalog()
    with pytest.raises(CatalogQueryError):
        relaxed_search(build_filter(build_preferences(style="modern")), catalog)
    assert catalog.calls == 1


def test_results_are_newest_first_and_capped() -> None:
    items = [
        _item(f"piece_{index}", created_at=f"2024-01-{index + 1:02d}T00:00:00+00:00")
        for index in range(25)
    ]
    catalog = InMemoryCatalogStore(items)
    result = relaxed_search(build_filter(PreferenceVector()), catalog, limit=20)
    assert len(result.items) == 20
    assert result.items[0].item_id == "piece_24"
    assert result.attempt_count == 1
