# assortment/services/solvers/remote_transport.py
"""
Transports for the remote approximate solver.

A transport is an async context manager: the outbound handle (HTTP client,
API client) is opened on enter and released on exit, whatever happened in
between. solve() returns the decoded, still untrusted payload; validation is
the dispatcher's job.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, Protocol

import httpx

from assortment.errors import RemoteProtocolError, RemoteTimeoutError, RemoteUnavailableError
from assortment.schemas.remote import RemoteSolveRequest

if TYPE_CHECKING:
    from assortment.config import Settings

logger = logging.getLogger(__name__)


class RemoteSolverTransport(Protocol):
    """Protocol that all remote solver backends must satisfy."""

    name: str

    async def __aenter__(self) -> "RemoteSolverTransport":  # pragma: no cover - interface only
        ...

    async def __aexit__(self, exc_type, exc, tb) -> None:  # pragma: no cover - interface only
        ...

    async def solve(self, request: RemoteSolveRequest) -> Any:  # pragma: no cover - interface only
        ...


class HttpRemoteSolverTransport:
    """POST the request body to a solver endpoint and return its JSON body."""

    name = "http"

    def __init__(self, url: str, timeout_s: float, client: Optional[httpx.AsyncClient] = None) -> None:
        self.url = url
        self.timeout_s = timeout_s
        self._injected = client
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "HttpRemoteSolverTransport":
        self._client = self._injected or httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout_s),
            follow_redirects=False,
            trust_env=False,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    async def solve(self, request: RemoteSolveRequest) -> Any:
        if self._client is None:
            raise RuntimeError("HttpRemoteSolverTransport used outside 'async with'")
        try:
            resp = await self._client.post(self.url, json=request.to_wire())
            resp.raise_for_status()
        except httpx.TimeoutException as exc:
            raise RemoteTimeoutError(f"Remote solver timed out: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            raise RemoteUnavailableError(
                f"Remote solver answered HTTP {exc.response.status_code}",
                details={"status_code": exc.response.status_code},
            ) from exc
        except httpx.HTTPError as exc:
            raise RemoteUnavailableError(f"Remote solver transport error: {exc}") from exc

        try:
            return resp.json()
        except ValueError as exc:
            raise RemoteProtocolError("Remote solver returned a non-JSON body", raw_payload=resp.text) from exc


def build_remote_transport(settings: "Settings") -> Optional[RemoteSolverTransport]:
    """Pick the configured backend; None when the remote path is disabled."""
    backend = settings.SOLVER_REMOTE_BACKEND
    if backend == "http":
        return HttpRemoteSolverTransport(url=str(settings.SOLVER_REMOTE_URL), timeout_s=settings.SOLVER_REMOTE_TIMEOUT)
    if backend == "llm":
        from assortment.llm.client import LLMRemoteSolverTransport

        return LLMRemoteSolverTransport.from_settings(settings)
    return None


__all__ = ["RemoteSolverTransport", "HttpRemoteSolverTransport", "build_remote_transport"]
