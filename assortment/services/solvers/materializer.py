# assortment/services/solvers/materializer.py
"""
Turn (item_id, portion) picks back into concrete units.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Tuple

from assortment.errors import AssortmentError
from assortment.schemas.catalog import CatalogItem
from assortment.schemas.selection import SelectedUnit
from assortment.utils.money import to_float


class OveruseError(AssortmentError):
    """A pick asked for more units of an item than are in stock."""


def tally_picks(picks: Iterable[Tuple[str, int]]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for item_id, portion in picks:
        counts[item_id] = counts.get(item_id, 0) + portion
    return counts


def assert_within_stock(counts: Mapping[str, int], items_by_id: Mapping[str, CatalogItem]) -> None:
    for item_id, count in counts.items():
        item = items_by_id.get(item_id)
        if item is None:
            raise OveruseError(f"Pick references unknown item {item_id!r}", details={"item_id": item_id})
        if count > item.quantity:
            raise OveruseError(
                f"Pick uses {count} units of {item_id!r} but only {item.quantity} are available",
                details={"item_id": item_id, "requested": count, "available": item.quantity},
            )


def materialize(picks: Iterable[Tuple[str, int]], items_by_id: Mapping[str, CatalogItem]) -> List[SelectedUnit]:
    """
    Expand picks into one SelectedUnit per unit, grouped by item in catalog order.

    Unit prices are reported at their quantized value so the units always add
    up to the total the solver computed.
    """
    counts = tally_picks(picks)
    assert_within_stock(counts, items_by_id)

    units: List[SelectedUnit] = []
    for item_id, item in items_by_id.items():
        count = counts.get(item_id, 0)
        if count <= 0:
            continue
        unit = SelectedUnit(id=item.id, name=item.name, unit_price=to_float(item.unit_price_minor))
        units.extend([unit] * count)
    return units


__all__ = ["OveruseError", "tally_picks", "assert_within_stock", "materialize"]
