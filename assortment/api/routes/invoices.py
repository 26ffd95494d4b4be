# assortment/api/routes/invoices.py

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from assortment.api.deps import get_dispatcher, require_shared_secret
from assortment.api.schemas.selection import InvoiceFillRequest
from assortment.errors import InvalidInputError
from assortment.jobs.invoice_fill_job import fill_invoice
from assortment.schemas.invoice import InvoiceDraft
from assortment.services.selection_dispatcher import SelectionDispatcher


router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.post("/fill", response_model=InvoiceDraft, dependencies=[Depends(require_shared_secret)])
async def fill_invoice_route(req: InvoiceFillRequest, dispatcher: SelectionDispatcher = Depends(get_dispatcher)) -> InvoiceDraft:
    """
    Build an invoice draft whose net total matches gross_total / (1 + VAT) as closely as possible.
    """
    try:
        return await fill_invoice(
            inventory=req.items,
            gross_total=req.gross_total,
            invoice_date=req.invoice_date,
            vat_rate=req.vat_rate,
            dispatcher=dispatcher,
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
