# assortment/services/catalog_filters.py
"""
Pre-solver filters for catalog items.
Rule: anything that can never be part of a selection is dropped BEFORE the
solver (or the remote payload) sees it.
"""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Union

from pydantic import ValidationError

from assortment.errors import InvalidInputError
from assortment.schemas.catalog import CatalogItem


def is_eligible_on(item: CatalogItem, as_of: date) -> bool:
    """
    Check whether an item may be sold on a given date.

    An item purchased after `as_of` was not in stock yet. Items without a
    purchase date are treated as always eligible.
    """
    if item.purchase_date is None:
        return True
    return item.purchase_date <= as_of


def eligible_items(items: Iterable[CatalogItem], as_of: date) -> List[CatalogItem]:
    return [it for it in items if it.is_solvable() and is_eligible_on(it, as_of)]


def solvable_items(items: Iterable[CatalogItem]) -> List[CatalogItem]:
    """Drop zero-quantity and zero-price (after quantization) items."""
    return [it for it in items if it.is_solvable()]


def priced_at_or_below(items: Iterable[CatalogItem], target_minor: int) -> List[CatalogItem]:
    """Items priced above the target can never be part of a remote answer we accept."""
    return [it for it in items if it.unit_price_minor <= target_minor]


def index_by_id(items: Sequence[CatalogItem]) -> Dict[str, CatalogItem]:
    """Map id -> item, keeping catalog order. Duplicate ids are a caller bug."""
    by_id: Dict[str, CatalogItem] = {}
    duplicates: List[str] = []
    for it in items:
        if it.id in by_id:
            duplicates.append(it.id)
            continue
        by_id[it.id] = it
    if duplicates:
        raise InvalidInputError(
            "Catalog contains duplicate item ids.",
            details={"duplicate_ids": sorted(set(duplicates))},
        )
    return by_id


def coerce_catalog(raw: Iterable[Union[CatalogItem, Mapping[str, Any]]]) -> List[CatalogItem]:
    """Validate raw catalog entries, raising InvalidInputError on the first bad one."""
    items: List[CatalogItem] = []
    for pos, entry in enumerate(raw):
        if isinstance(entry, CatalogItem):
            items.append(entry)
            continue
        try:
            items.append(CatalogItem.model_validate(entry))
        except ValidationError as exc:
            raise InvalidInputError(
                f"Catalog entry #{pos} is malformed.",
                details={"position": pos, "errors": exc.errors(include_url=False, include_context=False, include_input=False)},
            ) from exc
    return items


__all__ = [
    "is_eligible_on",
    "eligible_items",
    "solvable_items",
    "priced_at_or_below",
    "index_by_id",
    "coerce_catalog",
]
