# assortment/api/routes/selection.py

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from assortment.api.deps import get_dispatcher, get_llm_transport, require_shared_secret
from assortment.api.schemas.selection import ApproximateUnit, SolveRequest
from assortment.errors import RemoteProtocolError, RemoteTimeoutError, RemoteUnavailableError
from assortment.llm.client import LLMRemoteSolverTransport
from assortment.schemas.remote import RemoteSolveRequest
from assortment.schemas.selection import SelectionOutcome
from assortment.services.selection_dispatcher import SelectionDispatcher
from assortment.services.solvers.remote_validation import parse_remote_units


router = APIRouter(prefix="/selection", tags=["selection"])


@router.post("/solve", response_model=SelectionOutcome, dependencies=[Depends(require_shared_secret)])
async def solve_selection(req: SolveRequest, dispatcher: SelectionDispatcher = Depends(get_dispatcher)) -> SelectionOutcome:
    """
    Select catalog units closest to the target. Failures come back as a
    200 with status="failed" and a reason.
    """
    return await dispatcher.solve(req.items, req.target)


@router.post(
    "/approximate",
    response_model=List[ApproximateUnit],
    dependencies=[Depends(require_shared_secret)],
)
async def approximate_selection(
    req: RemoteSolveRequest,
    transport: LLMRemoteSolverTransport = Depends(get_llm_transport),
) -> List[ApproximateUnit]:
    """
    Remote-solver contract served by the LLM backend: one entry per unit.
    Only the shape is checked here; inventory validation is the caller's job.
    """
    if not req.candidate_items or req.target <= 0:
        return []
    try:
        async with transport:
            raw = await transport.solve(req)
        units = parse_remote_units(raw)
    except RemoteTimeoutError as e:
        raise HTTPException(status_code=504, detail=str(e)) from e
    except RemoteProtocolError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    except RemoteUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e

    return [ApproximateUnit(id=u.id, name=u.name, unitPrice=u.unit_price) for u in units]
