"""Catalog item data model and helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from models.taxonomy import (
    CATEGORIES,
    GENDERS,
    MATERIALS,
    OCCASIONS,
    STYLES,
    normalise_colors,
    normalise_tags,
    validate_choice,
)


def _ensure_list(value: Any) -> List[Any]:
    """Coerce a scalar or iterable into a list."""

    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def _parse_timestamp(value: Any) -> datetime:
    if value is None:
        return datetime.now(timezone.utc)
    parsed = value if isinstance(value, datetime) else datetime.fromisoformat(str(value))
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    # Stored as ISO text and ordered lexically, so keep a single offset.
    return parsed.astimezone(timezone.utc)


_TRUE_TOKENS = frozenset({"true", "1", "yes", "y"})
_FALSE_TOKENS = frozenset({"false", "0", "no", "n"})


def _parse_flag(value: Any, field_name: str) -> bool:
    """Parse a boolean flag from product exports, where it may arrive as text."""

    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        token = value.strip().lower()
        if token in _TRUE_TOKENS:
            return True
        if token in _FALSE_TOKENS:
            return False
    raise ValueError(f"Unsupported {field_name} flag {value!r}. Expected true/false.")


def _validate_tags(values: Iterable[Any], allowed, field_name: str) -> List[str]:
    values = _ensure_list(values)
    for value in values:
        validate_choice(value, allowed, field_name)
    return normalise_tags(values, allowed)


@dataclass
class CatalogItem:
    """Represents a jewelry piece in the catalog.

    ``styles`` is a list because the persisted product record stores several
    styles per piece; matching treats it as set membership.
    """

    item_id: str
    name: str
    price: float
    category: str
    styles: List[str] = field(default_factory=list)
    occasions: List[str] = field(default_factory=list)
    materials: List[str] = field(default_factory=list)
    colors: List[str] = field(default_factory=list)
    gender: str = "unisex"
    in_stock: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    description: Optional[str] = None
    designer: Optional[str] = None
    image_url: Optional[str] = None
    link: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.price = float(self.price)
        if self.price < 0:
            raise ValueError(f"price must be >= 0, got {self.price}")
        self.category = validate_choice(self.category, CATEGORIES, "category")
        self.styles = _validate_tags(self.styles, STYLES, "style") or ["traditional"]
        self.occasions = _validate_tags(self.occasions, OCCASIONS, "occasion")
        self.materials = _validate_tags(self.materials, MATERIALS, "material")
        self.colors = normalise_colors(_ensure_list(self.colors))
        self.gender = validate_choice(self.gender, GENDERS, "gender")
        self.in_stock = _parse_flag(self.in_stock, "in_stock")
        self.created_at = _parse_timestamp(self.created_at)
        self.tags = [str(tag).strip() for tag in _ensure_list(self.tags) if str(tag).strip()]

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to a JSON-friendly mapping."""

        return {
            "item_id": self.item_id,
            "name": self.name,
            "price": self.price,
            "category": self.category,
            "styles": list(self.styles),
            "occasions": list(self.occasions),
            "materials": list(self.materials),
            "colors": list(self.colors),
            "gender": self.gender,
            "in_stock": self.in_stock,
            "created_at": self.created_at.isoformat(),
            "description": self.description,
            "designer": self.designer,
            "image_url": self.image_url,
            "link": self.link,
            "tags": list(self.tags),
        }


def from_raw_metadata(metadata: Dict[str, Any]) -> CatalogItem:
    """Factory to build a :class:`CatalogItem` from a loose product record.

    Accepts both ``style`` (string or list) and ``styles`` as well as the
    camelCase ``inStock``/``createdAt`` keys used by product exports.
    """

    required_fields = ["item_id", "name", "price", "category"]
    missing = [name for name in required_fields if metadata.get(name) in (None, "")]
    if missing:
        raise ValueError(f"Missing required fields for CatalogItem: {missing}")

    styles = metadata.get("styles", metadata.get("style"))
    in_stock = metadata.get("in_stock", metadata.get("inStock", True))
    if in_stock is None:
        in_stock = True
    created_at = metadata.get("created_at", metadata.get("createdAt"))

    return CatalogItem(
        item_id=str(metadata["item_id"]),
        name=str(metadata["name"]),
        price=metadata["price"],
        category=str(metadata["category"]),
        styles=_ensure_list(styles),
        occasions=_ensure_list(metadata.get("occasions")),
        materials=_ensure_list(metadata.get("materials")),
        colors=_ensure_list(metadata.get("colors")),
        gender=str(metadata.get("gender") or "unisex"),
        in_stock=in_stock,
        created_at=created_at,
        description=metadata.get("description"),
        designer=metadata.get("designer"),
        image_url=metadata.get("image_url"),
        link=metadata.get("link"),
        tags=_ensure_list(metadata.get("tags")),
    )


__all__ = ["CatalogItem", "from_raw_metadata"]
