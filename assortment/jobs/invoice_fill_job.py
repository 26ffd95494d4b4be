# assortment/jobs/invoice_fill_job.py
"""
Invoice fill orchestration.

Given an inventory, an invoice date and a tax-inclusive total:
1. Keep items that are in stock, priced, and purchased on/before the invoice date
2. Convert the gross total to the net (tax-exclusive) target
3. Dispatch the selection
4. Group selected units into invoice lines and compute net / VAT / gross totals

No rendering and no persistence here; callers own both.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from assortment.config import settings
from assortment.errors import InvalidInputError
from assortment.schemas.catalog import CatalogItem
from assortment.schemas.invoice import InvoiceDraft, InvoiceLine
from assortment.schemas.selection import SelectedUnit, SelectionOutcome
from assortment.services.catalog_filters import coerce_catalog, eligible_items
from assortment.services.selection_dispatcher import SelectionDispatcher
from assortment.utils.money import Amount, is_valid_amount, net_from_gross, quantize, to_float, vat_on

logger = logging.getLogger(__name__)


def group_units(units: List[SelectedUnit]) -> List[InvoiceLine]:
    """Collapse repeated units into lines, keeping first-seen order."""
    grouped: Dict[str, List[SelectedUnit]] = {}
    for u in units:
        grouped.setdefault(u.id, []).append(u)

    lines: List[InvoiceLine] = []
    for item_id, same in grouped.items():
        unit_minor = quantize(same[0].unit_price)
        lines.append(
            InvoiceLine(
                id=item_id,
                name=same[0].name,
                unit_price=to_float(unit_minor),
                quantity=len(same),
                line_total=to_float(unit_minor * len(same)),
            )
        )
    return lines


async def fill_invoice(
    *,
    inventory: Iterable[Union[CatalogItem, Mapping[str, Any]]],
    gross_total: Amount,
    invoice_date: date,
    vat_rate: Optional[float] = None,
    dispatcher: Optional[SelectionDispatcher] = None,
) -> InvoiceDraft:
    """
    Build an invoice draft whose net total is as close as possible to gross_total / (1 + vat_rate).

    Args:
        inventory: Catalog entries (CatalogItem or raw dicts)
        gross_total: Tax-inclusive total requested by the user (> 0)
        invoice_date: Items purchased after this date are not eligible
        vat_rate: Defaults to settings.INVOICE_VAT_RATE
        dispatcher: Defaults to a dispatcher built from settings

    Raises:
        InvalidInputError: non-positive gross total, bad VAT rate or malformed inventory
    """
    rate = settings.INVOICE_VAT_RATE if vat_rate is None else vat_rate
    if rate < 0:
        raise InvalidInputError(f"VAT rate must be >= 0, got {rate!r}")
    if not is_valid_amount(gross_total) or quantize(gross_total) <= 0:
        raise InvalidInputError(f"Invoice total must be a positive amount, got {gross_total!r}")

    dispatcher = dispatcher or SelectionDispatcher.from_settings(settings)

    items = eligible_items(coerce_catalog(inventory), invoice_date)
    net_target_minor = net_from_gross(gross_total, rate)

    logger.info(
        "invoice.fill.start",
        extra={"target_minor": net_target_minor, "catalog_size": len(items)},
    )

    outcome: SelectionOutcome = await dispatcher.solve(items, to_float(net_target_minor))

    draft = InvoiceDraft(
        invoice_date=invoice_date,
        requested_gross=to_float(quantize(gross_total)),
        vat_rate=rate,
        net_target=to_float(net_target_minor),
        eligible_item_count=len(items),
        outcome=outcome,
    )
    if outcome.status != "selected":
        logger.info("invoice.fill.no_selection", extra={"reason": outcome.reason.value if outcome.reason else None})
        return draft

    net_minor = outcome.total_minor
    vat_minor = vat_on(net_minor, rate)
    draft.lines = group_units(outcome.units)
    draft.net_total = to_float(net_minor)
    draft.vat_amount = to_float(vat_minor)
    draft.gross_total = to_float(net_minor + vat_minor)
    draft.net_difference = to_float(net_minor - net_target_minor)

    logger.info(
        "invoice.fill.done",
        extra={
            "path": outcome.path,
            "target_minor": net_target_minor,
            "best_sum": net_minor,
            "unit_count": len(outcome.units),
        },
    )
    return draft


def run_invoice_fill(
    *,
    inventory: Iterable[Union[CatalogItem, Mapping[str, Any]]],
    gross_total: Amount,
    invoice_date: date,
    vat_rate: Optional[float] = None,
    dispatcher: Optional[SelectionDispatcher] = None,
) -> InvoiceDraft:
    """Blocking wrapper around fill_invoice()."""
    return asyncio.run(
        fill_invoice(
            inventory=inventory,
            gross_total=gross_total,
            invoice_date=invoice_date,
            vat_rate=vat_rate,
            dispatcher=dispatcher,
        )
    )


__all__ = ["group_units", "fill_invoice", "run_invoice_fill"]
