# test_scripts/test_invoice_fill_job.py

from __future__ import annotations

from datetime import date

import pytest

from assortment.errors import InvalidInputError
from assortment.jobs.invoice_fill_job import group_units, run_invoice_fill
from assortment.schemas.selection import FailureReason, SelectedUnit
from assortment.services.selection_dispatcher import SelectionDispatcher, SolverPolicy

from conftest import FakeTransport, make_item

INVOICE_DAY = date(2026, 3, 1)


def _dispatcher(**kw) -> SelectionDispatcher:
    return SelectionDispatcher(policy=SolverPolicy(), **kw)


def test_gross_total_is_converted_to_net_target():
    inventory = [make_item("A", 30.00, 4), make_item("B", 10.00, 2)]
    draft = run_invoice_fill(
        inventory=inventory, gross_total=120.00, invoice_date=INVOICE_DAY, vat_rate=0.20, dispatcher=_dispatcher()
    )

    assert draft.net_target == 100.00
    assert draft.outcome.status == "selected"
    assert draft.net_total == 100.00
    assert draft.vat_amount == 20.00
    assert draft.gross_total == 120.00
    assert draft.net_difference == 0.0
    assert sum(line.line_total for line in draft.lines) == pytest.approx(100.00)


def test_items_purchased_after_invoice_date_are_ignored():
    inventory = [
        make_item("OLD", 50.00, 1, purchase_date=date(2026, 1, 15)),
        make_item("SAMEDAY", 25.00, 1, purchase_date=INVOICE_DAY),
        make_item("NEW", 100.00, 1, purchase_date=date(2026, 3, 2)),
        make_item("UNDATED", 25.00, 1),
    ]
    draft = run_invoice_fill(
        inventory=inventory, gross_total=120.00, invoice_date=INVOICE_DAY, vat_rate=0.20, dispatcher=_dispatcher()
    )

    assert draft.eligible_item_count == 3
    assert {line.id for line in draft.lines} == {"OLD", "SAMEDAY", "UNDATED"}
    assert draft.net_total == 100.00


def test_raw_inventory_dicts_with_camel_case_dates():
    inventory = [
        {"id": "A", "name": "Alpha", "purchasePrice": 12.5, "quantity": 8, "purchaseDate": "2026-02-01"},
        {"id": "Z", "name": "Zero stock", "purchasePrice": 5, "quantity": 0},
    ]
    draft = run_invoice_fill(
        inventory=inventory, gross_total=60.00, invoice_date=INVOICE_DAY, vat_rate=0.20, dispatcher=_dispatcher()
    )

    assert draft.eligible_item_count == 1
    assert len(draft.lines) == 1
    line = draft.lines[0]
    assert (line.id, line.name, line.unit_price, line.quantity, line.line_total) == ("A", "Alpha", 12.5, 4, 50.0)


def test_no_selection_leaves_totals_empty():
    draft = run_invoice_fill(
        inventory=[make_item("BIG", 500.00, 1)],
        gross_total=12.00,
        invoice_date=INVOICE_DAY,
        vat_rate=0.20,
        dispatcher=_dispatcher(),
    )
    assert draft.outcome.status == "failed"
    assert draft.outcome.reason == FailureReason.NO_COMBINATION_FOUND
    assert draft.lines == []
    assert draft.net_total == 0.0
    assert draft.net_difference is None


def test_remote_path_is_used_for_large_targets():
    inventory = [make_item(f"I{i}", 10.00, 5) for i in range(4)]
    transport = FakeTransport([{"id": "I0", "unitPrice": 10.0}] * 3)
    dispatcher = SelectionDispatcher(
        policy=SolverPolicy(local_target_threshold=1_000, hybrid_item_threshold=2, remote_timeout_s=1.0),
        transport_factory=lambda: transport,
    )
    draft = run_invoice_fill(
        inventory=inventory, gross_total=36.00, invoice_date=INVOICE_DAY, vat_rate=0.20, dispatcher=dispatcher
    )

    assert draft.outcome.path == "remote"
    assert transport.requests[0].target == 30.00
    assert [(line.id, line.quantity) for line in draft.lines] == [("I0", 3)]
    assert draft.gross_total == 36.00


@pytest.mark.parametrize("gross", [0, 0.004, -10, float("nan")])
def test_non_positive_gross_total_is_rejected(gross):
    with pytest.raises(InvalidInputError):
        run_invoice_fill(inventory=[], gross_total=gross, invoice_date=INVOICE_DAY, dispatcher=_dispatcher())


def test_negative_vat_rate_is_rejected():
    with pytest.raises(InvalidInputError):
        run_invoice_fill(
            inventory=[], gross_total=10, invoice_date=INVOICE_DAY, vat_rate=-0.1, dispatcher=_dispatcher()
        )


def test_group_units_keeps_first_seen_order():
    units = [
        SelectedUnit(id="B", name="Beta", unit_price=7.0),
        SelectedUnit(id="A", name="Alpha", unit_price=3.0),
        SelectedUnit(id="B", name="Beta", unit_price=7.0),
    ]
    lines = group_units(units)
    assert [(line.id, line.quantity, line.line_total) for line in lines] == [("B", 2, 14.0), ("A", 1, 3.0)]
