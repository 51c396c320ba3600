"""Catalog search that relaxes soft filter clauses until results appear."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List

from logic.catalog_filter import Filter, relaxation_snapshots
from models.catalog_item import CatalogItem
from tools.catalog_store import DEFAULT_QUERY_LIMIT, CatalogStore

logger = logging.getLogger(__name__)


class CatalogQueryError(RuntimeError):
    """Raised when the catalog collaborator fails to answer a query."""


@dataclass(frozen=True)
class RelaxationResult:
    """Items from the first non-empty attempt plus a trace of every attempt."""

    items: List[CatalogItem]
    applied_filter: Filter
    attempts: List[Dict[str, object]]
    relaxed: List[str]

    @property
    def attempt_count(self) -> int:
        return len(self.attempts)


def relaxed_search(
    catalog_filter: Filter, catalog: CatalogStore, limit: int = DEFAULT_QUERY_LIMIT
) -> RelaxationResult:
    """Query ``catalog`` with progressively weaker snapshots of ``catalog_filter``.

    Stops at the first snapshot that returns items. When even the last snapshot
    (stock and price only) is empty, the result carries no items; that is a
    normal outcome. A failing query is not retried and surfaces as
    :class:`CatalogQueryError`.
    """

    attempts: List[Dict[str, object]] = []
    relaxed: List[str] = []
    snapshot = catalog_filter
    for dropped, snapshot in relaxation_snapshots(catalog_filter):
        if dropped is not None:
            relaxed.append(dropped)
            logger.info("No matches, relaxing %s clause", dropped)
        try:
            items = catalog.query(snapshot, limit=limit)
        except Exception as exc:
            logger.error("Catalog query failed on attempt %s", len(attempts) + 1)
            raise CatalogQueryError(f"Catalog query failed: {exc}") from exc

        attempts.append({"clauses": list(snapshot.kinds), "dropped": dropped, "found": len(items)})
        logger.info("Relaxation attempt %s with %s -> %s items", len(attempts), list(snapshot.kinds), len(items))
        if items:
            return RelaxationResult(items=list(items), applied_filter=snapshot, attempts=attempts, relaxed=relaxed)

    logger.warning("No catalog items found even after relaxing %s", relaxed)
    return RelaxationResult(items=[], applied_filter=snapshot, attempts=attempts, relaxed=relaxed)


__all__ = ["CatalogQueryError", "RelaxationResult", "relaxed_search"]
