# assortment/api/deps.py

from __future__ import annotations

from fastapi import Header, HTTPException

from assortment.config import settings
from assortment.errors import RemoteUnavailableError
from assortment.llm.client import LLMRemoteSolverTransport
from assortment.services.selection_dispatcher import SelectionDispatcher


def get_dispatcher() -> SelectionDispatcher:
    return SelectionDispatcher.from_settings(settings)


def get_llm_transport() -> LLMRemoteSolverTransport:
    try:
        return LLMRemoteSolverTransport.from_settings(settings)
    except RemoteUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e


def require_shared_secret(x_assortment_secret: str | None = Header(default=None)) -> None:
    """
    v1 security: shared secret header.
    Header name: X-ASSORTMENT-SECRET
    """
    expected = settings.ASSORTMENT_API_SECRET
    if not expected:
        # If secret isn't configured, fail closed (recommended).
        raise HTTPException(status_code=500, detail="ASSORTMENT_API_SECRET is not configured")

    if not x_assortment_secret or x_assortment_secret != expected:
        raise HTTPException(status_code=401, detail="Unauthorized")
