# assortment/services/solvers/binary_expander.py
"""
Bounded -> 0/1 rewrite by binary decomposition of stock quantities.

An item with quantity 13 becomes portions 1, 2, 4 and 6: every count from 0
to 13 is the sum of exactly one subset of those portions, so a solver that
uses each portion at most once can still pick any number of units.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple


@dataclass(frozen=True)
class SplitUnit:
    """A bundle of `portion` units of one item, priced as a whole (minor units)."""
    item_id: str
    price: int
    portion: int


def binary_portions(quantity: int) -> List[int]:
    """Return 1, 2, 4, ... with the last portion truncated so the sum is `quantity`."""
    portions: List[int] = []
    remaining = quantity
    power = 1
    while remaining > 0:
        portion = min(remaining, power)
        portions.append(portion)
        remaining -= portion
        power *= 2
    return portions


def expand_item(item_id: str, quantity: int, unit_price: int) -> List[SplitUnit]:
    return [SplitUnit(item_id=item_id, price=unit_price * p, portion=p) for p in binary_portions(quantity)]


def expand_items(priced: Iterable[Tuple[str, int, int]]) -> List[SplitUnit]:
    """
    Expand (item_id, quantity, unit_price_minor) triples into split units.

    Input is expected to be pre-filtered (quantity >= 1, price >= 1); anything
    else contributes no splits.
    """
    splits: List[SplitUnit] = []
    for item_id, quantity, unit_price in priced:
        if quantity <= 0 or unit_price <= 0:
            continue
        splits.extend(expand_item(item_id, quantity, unit_price))
    return splits


__all__ = ["SplitUnit", "binary_portions", "expand_item", "expand_items"]
