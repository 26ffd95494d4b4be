# assortment/services/solvers/remote_validation.py
"""
Strict checks on the remote solver's answer BEFORE it becomes a selection.

The remote solver is approximate and untrusted. Its answer is accepted only
when every unit names a candidate item at that item's price and no item is
used more often than it is stocked. Nothing is clamped or repaired: a
clamped answer would report a total the solver never computed.
"""
from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Dict, List, Mapping

from pydantic import ValidationError

from assortment.errors import RemoteProtocolError, RemoteValidationError
from assortment.schemas.catalog import CatalogItem
from assortment.schemas.remote import RemoteUnit
from assortment.schemas.selection import SelectedUnit
from assortment.schemas.validation import ValidationIssue, ValidationReport
from assortment.utils.money import quantize, to_float

logger = logging.getLogger(__name__)


def parse_remote_units(raw: Any) -> List[RemoteUnit]:
    """Shape check: a flat list of {id, unitPrice} objects, one per unit."""
    if not isinstance(raw, list):
        raise RemoteProtocolError(
            f"Remote response must be a list, got {type(raw).__name__}",
            raw_payload=raw,
        )

    units: List[RemoteUnit] = []
    for pos, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise RemoteProtocolError(
                f"Remote response entry #{pos} is not an object",
                raw_payload=raw,
                details={"position": pos},
            )
        try:
            units.append(RemoteUnit.model_validate(entry))
        except ValidationError as exc:
            raise RemoteProtocolError(
                f"Remote response entry #{pos} lacks a valid id/unitPrice",
                raw_payload=raw,
                details={
                    "position": pos,
                    "errors": exc.errors(include_url=False, include_context=False, include_input=False),
                },
            ) from exc
    return units


def check_remote_units(units: List[RemoteUnit], candidates_by_id: Mapping[str, CatalogItem]) -> ValidationReport:
    """Run all inventory checks and return a structured report."""
    issues: List[ValidationIssue] = []
    counts = Counter(u.id for u in units)

    issues.extend(_check_unknown_ids(counts, candidates_by_id))
    issues.extend(_check_stock(counts, candidates_by_id))
    issues.extend(_check_prices(units, candidates_by_id))

    return ValidationReport.from_issues(
        issues,
        details={"unit_count": len(units), "counts_by_id": dict(counts)},
    )


def _check_unknown_ids(counts: Mapping[str, int], candidates_by_id: Mapping[str, CatalogItem]) -> List[ValidationIssue]:
    unknown = sorted(k for k in counts if k not in candidates_by_id)
    if not unknown:
        return []
    return [
        ValidationIssue(
            severity="error",
            code="UNKNOWN_ITEM",
            message="Remote answer references item(s) that were not offered as candidates.",
            item_ids=unknown,
        )
    ]


def _check_stock(counts: Mapping[str, int], candidates_by_id: Mapping[str, CatalogItem]) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    for item_id in sorted(counts):
        item = candidates_by_id.get(item_id)
        if item is None:
            continue
        if counts[item_id] > item.quantity:
            issues.append(
                ValidationIssue(
                    severity="error",
                    code="QUANTITY_EXCEEDED",
                    message=f"Remote answer uses {counts[item_id]} units of {item_id} but only {item.quantity} are available.",
                    item_ids=[item_id],
                    details={"requested": counts[item_id], "available": item.quantity},
                )
            )
    return issues


def _check_prices(units: List[RemoteUnit], candidates_by_id: Mapping[str, CatalogItem]) -> List[ValidationIssue]:
    mismatched: Dict[str, Dict[str, int]] = {}
    for u in units:
        item = candidates_by_id.get(u.id)
        if item is None or u.id in mismatched:
            continue
        reported = quantize(u.unit_price)
        if reported != item.unit_price_minor:
            mismatched[u.id] = {"reported_minor": reported, "catalog_minor": item.unit_price_minor}
    return [
        ValidationIssue(
            severity="error",
            code="PRICE_MISMATCH",
            message=f"Remote answer prices {item_id} differently from the catalog.",
            item_ids=[item_id],
            details=details,
        )
        for item_id, details in mismatched.items()
    ]


def accept_remote_units(raw: Any, candidates_by_id: Mapping[str, CatalogItem]) -> List[SelectedUnit]:
    """
    Parse + validate a raw remote payload and expand it 1:1 into selected units.

    Raises:
        RemoteProtocolError: payload shape is wrong
        RemoteValidationError: payload disagrees with the inventory
    """
    units = parse_remote_units(raw)
    report = check_remote_units(units, candidates_by_id)
    if not report.is_valid:
        logger.warning(
            "solver.remote.validation_failed",
            extra={"path": "remote", "reason": report.summary, "unit_count": len(units)},
        )
        raise RemoteValidationError(
            f"Remote answer rejected: {report.summary}",
            details={"validation": report.model_dump()},
        )

    selected: List[SelectedUnit] = []
    for u in units:
        item = candidates_by_id[u.id]
        selected.append(SelectedUnit(id=item.id, name=item.name, unit_price=to_float(item.unit_price_minor)))
    return selected


__all__ = ["parse_remote_units", "check_remote_units", "accept_remote_units"]
