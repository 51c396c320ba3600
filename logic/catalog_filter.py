"""Structured, relaxable catalog filters built from shopper preferences."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from models.catalog_item import CatalogItem
from models.complementarity import complements_of
from models.preferences import PreferenceVector
from models.taxonomy import BINARY_GENDERS

logger = logging.getLogger(__name__)

IN_STOCK = "in_stock"
PRICE = "price"
COLOR = "color"
MATERIAL = "material"
OCCASION = "occasion"
STYLE = "style"
CATEGORY = "category"
GENDER = "gender"

# Soft clauses, dropped in this order when a query comes back empty.
RELAXATION_ORDER: Tuple[str, ...] = (COLOR, MATERIAL, OCCASION, STYLE, CATEGORY, GENDER)
# Hard clauses are never relaxed.
HARD_CLAUSES: Tuple[str, ...] = (IN_STOCK, PRICE)


@dataclass(frozen=True)
class Clause:
    """A single typed predicate over one catalog attribute.

    Operators:
        ``eq``: attribute equals ``value``.
        ``lte``: attribute is at most ``value``.
        ``contains``: list attribute contains ``value``.
        ``one_of``: attribute is one of the values in ``value``.
        ``intersects_any``: list attribute shares a member with at least one
        of the groups in ``value``.
    """

    kind: str
    attribute: str
    operator: str
    value: Any

    def matches(self, item: CatalogItem) -> bool:
        actual = getattr(item, self.attribute)
        if self.operator == "eq":
            return actual == self.value
        if self.operator == "lte":
            return actual <= self.value
        if self.operator == "contains":
            return self.value in actual
        if self.operator == "one_of":
            return actual in self.value
        if self.operator == "intersects_any":
            present = set(actual)
            return any(present.intersection(group) for group in self.value)
        raise ValueError(f"Unsupported clause operator '{self.operator}'")

    def describe(self) -> Dict[str, Any]:
        value = self.value
        if self.operator == "intersects_any":
            value = [sorted(group) if isinstance(group, frozenset) else list(group) for group in value]
        elif isinstance(value, tuple):
            value = list(value)
        return {"attribute": self.attribute, "operator": self.operator, "value": value}


@dataclass(frozen=True)
class Filter:
    """Immutable AND of clauses; at most one clause per kind."""

    clauses: Tuple[Clause, ...]

    def __post_init__(self) -> None:
        kinds = [clause.kind for clause in self.clauses]
        if len(kinds) != len(set(kinds)):
            raise ValueError(f"Duplicate clause kinds in filter: {kinds}")

    @property
    def kinds(self) -> Tuple[str, ...]:
        return tuple(clause.kind for clause in self.clauses)

    def has(self, kind: str) -> bool:
        return kind in self.kinds

    def get(self, kind: str) -> Clause | None:
        for clause in self.clauses:
            if clause.kind == kind:
                return clause
        return None

    def without(self, kind: str) -> "Filter":
        """Return a new filter with the clause of ``kind`` removed."""

        if kind in HARD_CLAUSES:
            raise ValueError(f"Clause '{kind}' cannot be relaxed")
        return Filter(tuple(clause for clause in self.clauses if clause.kind != kind))

    def matches(self, item: CatalogItem) -> bool:
        return all(clause.matches(item) for clause in self.clauses)

    def describe(self) -> Dict[str, Dict[str, Any]]:
        return {clause.kind: clause.describe() for clause in self.clauses}


def build_filter(prefs: PreferenceVector) -> Filter:
    """Turn a preference vector into the strictest catalog filter.

    Only the in-stock clause is unconditional; every other clause appears only
    when the matching preference is present.
    """

    clauses: List[Clause] = [Clause(IN_STOCK, "in_stock", "eq", True)]
    if prefs.budget is not None and prefs.budget > 0:
        clauses.append(Clause(PRICE, "price", "lte", prefs.budget))
    if prefs.style:
        clauses.append(Clause(STYLE, "styles", "contains", prefs.style))
    if prefs.occasion:
        clauses.append(Clause(OCCASION, "occasions", "contains", prefs.occasion))
    if prefs.category:
        clauses.append(Clause(CATEGORY, "category", "eq", prefs.category))
    if prefs.material:
        clauses.append(Clause(MATERIAL, "materials", "contains", prefs.material))
    if prefs.gender in BINARY_GENDERS:
        clauses.append(Clause(GENDER, "gender", "one_of", (prefs.gender, "unisex")))
    if prefs.colors:
        direct = frozenset(prefs.colors)
        clauses.append(Clause(COLOR, "colors", "intersects_any", (direct, complements_of(prefs.colors))))

    built = Filter(tuple(clauses))
    logger.info("Built catalog filter with clauses %s", list(built.kinds))
    return built


def relaxation_snapshots(initial: Filter) -> List[Tuple[str | None, Filter]]:
    """Return the filter followed by each progressively relaxed snapshot.

    Each entry pairs the clause kind removed to reach it (``None`` for the
    initial filter) with the snapshot. Kinds the filter never had are skipped.
    """

    snapshots: List[Tuple[str | None, Filter]] = [(None, initial)]
    current = initial
    for kind in RELAXATION_ORDER:
        if not current.has(kind):
            continue
        current = current.without(kind)
        snapshots.append((kind, current))
    return snapshots


__all__ = [
    "Clause",
    "Filter",
    "build_filter",
    "relaxation_snapshots",
    "RELAXATION_ORDER",
    "HARD_CLAUSES",
    "IN_STOCK",
    "PRICE",
    "COLOR",
    "MATERIAL",
    "OCCASION",
    "STYLE",
    "CATEGORY",
    "GENDER",
]
