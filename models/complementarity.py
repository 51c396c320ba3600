"""Static color complementarity table shared by filtering and scoring."""
from __future__ import annotations

import logging
from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping

logger = logging.getLogger(__name__)

COMPLEMENTARY_COLORS: Mapping[str, FrozenSet[str]] = MappingProxyType(
    {
        "red": frozenset({"gold", "green", "white"}),
        "blue": frozenset({"silver", "white", "gold"}),
        "green": frozenset({"gold", "red", "white"}),
        "yellow": frozenset({"blue", "purple", "silver"}),
        "orange": frozenset({"blue", "teal", "gold"}),
        "purple": frozenset({"yellow", "gold", "silver"}),
        "pink": frozenset({"green", "gold", "silver"}),
        "black": frozenset({"gold", "silver", "white"}),
        "white": frozenset({"gold", "silver", "black"}),
        "gray": frozenset({"gold", "silver", "blue"}),
        "gold": frozenset({"red", "green", "blue"}),
        "silver": frozenset({"blue", "purple", "black"}),
    }
)


def complements_of(colors: Iterable[str]) -> FrozenSet[str]:
    """Return the union of complementary labels for ``colors``.

    Labels without an entry (``teal``, ``neutral``) contribute nothing.
    """

    requested = list(colors)
    result: set = set()
    for color in requested:
        result.update(COMPLEMENTARY_COLORS.get(color, frozenset()))
    logger.debug("complements of %s -> %s", requested, sorted(result))
    return frozenset(result)


__all__ = ["COMPLEMENTARY_COLORS", "complements_of"]
