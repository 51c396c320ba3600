"""Catalog storage abstractions with in-memory and SQLite implementations."""
from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Iterable, List, Optional

from logic.catalog_filter import IN_STOCK, PRICE, Filter
from models.catalog_item import CatalogItem
from tools.observability import instrument_tool

DEFAULT_QUERY_LIMIT = 20


def _newest_first(items: Iterable[CatalogItem]) -> List[CatalogItem]:
    return sorted(items, key=lambda item: item.created_at, reverse=True)


class CatalogStore:
    """Read/write interface for catalog items.

    The matching engine only relies on :meth:`query`; the remaining methods
    exist so that catalogs can be seeded and inspected.
    """

    def create_item(self, item: CatalogItem) -> CatalogItem:
        raise NotImplementedError

    def get_item(self, item_id: str) -> Optional[CatalogItem]:
        raise NotImplementedError

    def list_items(self) -> List[CatalogItem]:
        raise NotImplementedError

    def delete_item(self, item_id: str) -> bool:
        raise NotImplementedError

    def query(self, catalog_filter: Filter, limit: int = DEFAULT_QUERY_LIMIT) -> List[CatalogItem]:
        """Return up to ``limit`` items matching ``catalog_filter``, newest first."""
        raise NotImplementedError


class InMemoryCatalogStore(CatalogStore):
    """Dictionary-backed catalog for tests and evaluation scenarios."""

    def __init__(self, items: Iterable[CatalogItem] = ()) -> None:
        self._items: dict = {}
        for item in items:
            self.create_item(item)

    def create_item(self, item: CatalogItem) -> CatalogItem:
        self._items[item.item_id] = item
        return item

    def get_item(self, item_id: str) -> Optional[CatalogItem]:
        return self._items.get(item_id)

    def list_items(self) -> List[CatalogItem]:
        return _newest_first(self._items.values())

    def delete_item(self, item_id: str) -> bool:
        return self._items.pop(item_id, None) is not None

    @instrument_tool("catalog_query")
    def query(self, catalog_filter: Filter, limit: int = DEFAULT_QUERY_LIMIT) -> List[CatalogItem]:
        return [item for item in self.list_items() if catalog_filter.matches(item)][:limit]


class SQLiteCatalogStore(CatalogStore):
    """Local SQLite-backed catalog."""

    def __init__(self, database_path: str | Path = "data/catalog.db") -> None:
        self.database_path = Path(database_path)
        if self.database_path.parent and not self.database_path.parent.exists():
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.database_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_tables(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS catalog_items (
                    item_id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    price REAL NOT NULL,
                    category TEXT NOT NULL,
                    styles TEXT,
                    occasions TEXT,
                    materials TEXT,
                    colors TEXT,
                    gender TEXT,
                    in_stock INTEGER NOT NULL DEFAULT 1,
                    created_at TEXT NOT NULL,
                    description TEXT,
                    designer TEXT,
                    image_url TEXT,
                    link TEXT,
                    tags TEXT
                );
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_catalog_stock_price ON catalog_items (in_stock, price)"
            )

    @staticmethod
    def _serialise_list(values: Optional[List[object]]) -> str:
        return json.dumps(values or [])

    @staticmethod
    def _deserialise_list(raw: str) -> List[object]:
        return json.loads(raw) if raw else []

    def create_item(self, item: CatalogItem) -> CatalogItem:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO catalog_items (
                    item_id, name, price, category, styles, occasions, materials, colors,
                    gender, in_stock, created_at, description, designer, image_url, link, tags
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    item.item_id,
                    item.name,
                    item.price,
                    item.category,
                    self._serialise_list(item.styles),
                    self._serialise_list(item.occasions),
                    self._serialise_list(item.materials),
                    self._serialise_list(item.colors),
                    item.gender,
                    int(item.in_stock),
                    item.created_at.isoformat(),
                    item.description,
                    item.designer,
                    item.image_url,
                    item.link,
                    self._serialise_list(item.tags),
                ),
            )
        return item

    def _row_to_item(self, row: sqlite3.Row) -> CatalogItem:
        return CatalogItem(
            item_id=row["item_id"],
            name=row["name"],
            price=row["price"],
            category=row["category"],
            styles=self._deserialise_list(row["styles"]),
            occasions=self._deserialise_list(row["occasions"]),
            materials=self._deserialise_list(row["materials"]),
            colors=self._deserialise_list(row["colors"]),
            gender=row["gender"],
            in_stock=bool(row["in_stock"]),
            created_at=row["created_at"],
            description=row["description"],
            designer=row["designer"],
            image_url=row["image_url"],
            link=row["link"],
            tags=self._deserialise_list(row["tags"]),
        )

    def get_item(self, item_id: str) -> Optional[CatalogItem]:
        with self._connect() as conn:
            cursor = conn.execute("SELECT * FROM catalog_items WHERE item_id = ?", (item_id,))
            row = cursor.fetchone()
            return self._row_to_item(row) if row else None

    def list_items(self) -> List[CatalogItem]:
        with self._connect() as conn:
            cursor = conn.execute("SELECT * FROM catalog_items ORDER BY created_at DESC, item_id")
            return [self._row_to_item(row) for row in cursor.fetchall()]

    def delete_item(self, item_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM catalog_items WHERE item_id = ?", (item_id,))
            return cursor.rowcount > 0

    @instrument_tool("catalog_query")
    def query(self, catalog_filter: Filter, limit: int = DEFAULT_QUERY_LIMIT) -> List[CatalogItem]:
        # Stock and price are pushed into SQL; list-valued clauses are checked in Python.
        sql = "SELECT * FROM catalog_items"
        conditions: List[str] = []
        params: List[object] = []
        stock_clause = catalog_filter.get(IN_STOCK)
        if stock_clause is not None:
            conditions.append("in_stock = ?")
            params.append(int(bool(stock_clause.value)))
        price_clause = catalog_filter.get(PRICE)
        if price_clause is not None:
            conditions.append("price <= ?")
            params.append(price_clause.value)
        if conditions:
            sql += " WHERE " + " AND ".join(conditions)
        sql += " ORDER BY created_at DESC, item_id"

        matched: List[CatalogItem] = []
        with self._connect() as conn:
            for row in conn.execute(sql, params):
                item = self._row_to_item(row)
                if catalog_filter.matches(item):
                    matched.append(item)
                    if len(matched) >= limit:
                        break
        return matched


__all__ = ["CatalogStore", "InMemoryCatalogStore", "SQLiteCatalogStore", "DEFAULT_QUERY_LIMIT"]
