# assortment/api/schemas/selection.py

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class SolveRequest(BaseModel):
    # Raw entries: malformed ones come back as an invalid_input outcome, not a 422
    items: List[Dict[str, Any]] = Field(default_factory=list)
    target: float


class InvoiceFillRequest(BaseModel):
    items: List[Dict[str, Any]] = Field(default_factory=list)
    gross_total: float
    invoice_date: date
    vat_rate: Optional[float] = Field(default=None, ge=0)


class ApproximateUnit(BaseModel):
    id: str
    name: Optional[str] = None
    unitPrice: float
