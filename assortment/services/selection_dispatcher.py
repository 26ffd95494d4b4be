# assortment/services/selection_dispatcher.py
"""
Hybrid dispatch between the exact local solver and the remote approximate solver.

Decide:
- target <= local target threshold           -> local
- catalog size <= hybrid item threshold      -> local
- otherwise                                  -> remote

Both paths return the same SelectionOutcome contract. Every failure is
returned as a failed outcome; nothing raised inside a solve escapes solve().
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterable, List, Mapping, Optional, Union

from assortment.errors import (
    AssortmentError,
    InvalidInputError,
    RemoteProtocolError,
    RemoteTimeoutError,
    RemoteUnavailableError,
)
from assortment.schemas.catalog import CatalogItem
from assortment.schemas.remote import RemoteCandidateItem, RemoteSolveRequest
from assortment.schemas.selection import FailureReason, SelectionOutcome, SolverPath
from assortment.services.catalog_filters import coerce_catalog, index_by_id, priced_at_or_below, solvable_items
from assortment.services.solvers.local_dp_adapter import DpConfig, LocalDpSolverAdapter
from assortment.services.solvers.remote_transport import RemoteSolverTransport, build_remote_transport
from assortment.services.solvers.remote_validation import accept_remote_units
from assortment.utils.money import Amount, is_valid_amount, quantize, to_float

if TYPE_CHECKING:
    from assortment.config import Settings

logger = logging.getLogger(__name__)

CatalogInput = Iterable[Union[CatalogItem, Mapping[str, Any]]]
TransportFactory = Callable[[], Optional[RemoteSolverTransport]]


@dataclass(frozen=True)
class SolverPolicy:
    """Dispatch tunables for one dispatcher (immutable snapshot of settings)."""

    local_target_threshold: int = 2_000_000  # minor units
    hybrid_item_threshold: int = 200
    remote_timeout_s: float = 30.0

    @classmethod
    def from_settings(cls, settings: "Settings") -> "SolverPolicy":
        return cls(
            local_target_threshold=settings.SOLVER_LOCAL_TARGET_THRESHOLD,
            hybrid_item_threshold=settings.SOLVER_HYBRID_ITEM_THRESHOLD,
            remote_timeout_s=settings.SOLVER_REMOTE_TIMEOUT,
        )


def decide_path(target_minor: int, catalog_size: int, policy: SolverPolicy) -> SolverPath:
    """Both boundaries are inclusive on the local side."""
    if target_minor <= policy.local_target_threshold:
        return "local"
    if catalog_size <= policy.hybrid_item_threshold:
        return "local"
    return "remote"


class SelectionDispatcher:
    """
    Entry point for solve requests.

    Holds configuration and collaborators only; per-request state lives in
    the solve() call, so one dispatcher can serve concurrent requests.
    """

    def __init__(
        self,
        policy: Optional[SolverPolicy] = None,
        local_solver: Optional[LocalDpSolverAdapter] = None,
        transport_factory: Optional[TransportFactory] = None,
    ) -> None:
        self.policy = policy or SolverPolicy()
        self.local_solver = local_solver or LocalDpSolverAdapter()
        self.transport_factory: TransportFactory = transport_factory or (lambda: None)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "SelectionDispatcher":
        return cls(
            policy=SolverPolicy.from_settings(settings),
            local_solver=LocalDpSolverAdapter(DpConfig(max_search_width=settings.SOLVER_LOCAL_MAX_SEARCH_WIDTH)),
            transport_factory=lambda: build_remote_transport(settings),
        )

    async def solve(self, catalog: CatalogInput, target: Amount) -> SelectionOutcome:
        """
        Select catalog units whose total is closest to `target` (major units).

        Returns:
            SelectionOutcome: selected / empty / failed(reason)
        """
        target_minor: Optional[int] = None
        path: Optional[SolverPath] = None
        try:
            if not is_valid_amount(target):
                raise InvalidInputError(f"Target must be a finite, non-negative amount, got {target!r}")
            target_minor = quantize(target)
            if target_minor == 0:
                return SelectionOutcome.empty(message="Target rounds to zero; nothing to select.")

            items = coerce_catalog(catalog)
            candidates = solvable_items(items)
            index_by_id(candidates)

            path = decide_path(target_minor, len(candidates), self.policy)
            logger.info(
                "solver.dispatch.decide",
                extra={"path": path, "target_minor": target_minor, "catalog_size": len(candidates)},
            )

            if path == "local":
                # CPU-bound; run it off the event loop
                return await asyncio.to_thread(self.local_solver.solve, candidates, target_minor)
            return await self._solve_remote(candidates, target_minor)

        except AssortmentError as exc:
            logger.warning(
                "solver.dispatch.failed",
                extra={"path": path, "reason": exc.reason.value, "target_minor": target_minor},
            )
            return SelectionOutcome.failed(
                exc.reason,
                str(exc),
                target_minor=target_minor,
                path=path,
                diagnostics=exc.details,
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception("solver.dispatch.internal_error", extra={"path": path, "target_minor": target_minor})
            return SelectionOutcome.failed(
                FailureReason.INTERNAL_ERROR,
                f"Unexpected solver error: {exc}",
                target_minor=target_minor,
                path=path,
            )

    def solve_sync(self, catalog: CatalogInput, target: Amount) -> SelectionOutcome:
        """Blocking wrapper for callers without an event loop."""
        return asyncio.run(self.solve(catalog, target))

    async def _solve_remote(self, candidates: List[CatalogItem], target_minor: int) -> SelectionOutcome:
        filtered = priced_at_or_below(candidates, target_minor)
        if not filtered:
            return SelectionOutcome.failed(
                FailureReason.NO_COMBINATION_FOUND,
                "Every item is priced above the target.",
                target_minor=target_minor,
                path="remote",
            )
        filtered_by_id = index_by_id(filtered)

        transport = self.transport_factory()
        if transport is None:
            raise RemoteUnavailableError("Remote solver selected but no backend is configured.")

        request = RemoteSolveRequest(
            candidate_items=[RemoteCandidateItem.from_catalog_item(it) for it in filtered],
            target=to_float(target_minor),
        )

        timeout_s = self.policy.remote_timeout_s
        started = time.perf_counter()
        async with transport:
            try:
                raw = await asyncio.wait_for(transport.solve(request), timeout=timeout_s)
            except asyncio.TimeoutError as exc:
                logger.warning(
                    "solver.remote.timeout",
                    extra={"path": "remote", "timeout_s": timeout_s, "backend": transport.name},
                )
                raise RemoteTimeoutError(f"Remote solver did not answer within {timeout_s}s") from exc
            except RemoteProtocolError as exc:
                logger.error(
                    "solver.remote.protocol_error",
                    extra={"path": "remote", "backend": transport.name, "raw_payload": repr(exc.raw_payload)},
                )
                raise

        try:
            units = accept_remote_units(raw, filtered_by_id)
        except RemoteProtocolError as exc:
            logger.error(
                "solver.remote.protocol_error",
                extra={"path": "remote", "backend": transport.name, "raw_payload": repr(exc.raw_payload)},
            )
            raise

        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

        if not units:
            logger.info("solver.remote.no_combination", extra={"path": "remote", "elapsed_ms": elapsed_ms})
            return SelectionOutcome.failed(
                FailureReason.NO_COMBINATION_FOUND,
                "Remote solver found no combination.",
                target_minor=target_minor,
                path="remote",
            )

        total_minor = sum(filtered_by_id[u.id].unit_price_minor for u in units)
        logger.info(
            "solver.remote.done",
            extra={
                "path": "remote",
                "backend": transport.name,
                "target_minor": target_minor,
                "best_sum": total_minor,
                "unit_count": len(units),
                "elapsed_ms": elapsed_ms,
            },
        )
        return SelectionOutcome.selected(
            units,
            total_minor=total_minor,
            target_minor=target_minor,
            path="remote",
            diagnostics={
                "backend": transport.name,
                "candidate_count": len(filtered),
                "distance_minor": abs(total_minor - target_minor),
            },
        )


__all__ = ["SolverPolicy", "decide_path", "SelectionDispatcher"]
