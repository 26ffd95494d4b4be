# assortment/schemas/invoice.py
"""
Invoice draft schemas produced by the invoice fill job.

Amounts are major units rounded to the cent; the raw minor-unit totals stay
available on the nested outcome.
"""
from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from assortment.schemas.selection import SelectionOutcome


class InvoiceLine(BaseModel):
    """One grouped invoice line: n units of the same item."""
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""
    unit_price: float
    quantity: int
    line_total: float


class InvoiceDraft(BaseModel):
    model_config = ConfigDict(extra="ignore")

    invoice_date: date
    requested_gross: float
    vat_rate: float

    net_target: float
    net_total: float = 0.0
    vat_amount: float = 0.0
    gross_total: float = 0.0
    # achieved net minus requested net (positive = overshoot)
    net_difference: Optional[float] = None

    eligible_item_count: int = 0
    lines: List[InvoiceLine] = Field(default_factory=list)
    outcome: SelectionOutcome
