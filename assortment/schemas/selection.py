# assortment/schemas/selection.py
"""
Selection outcome schemas for solver output.

Both the exact local solver and the remote approximate solver converge on
SelectionOutcome, so callers never need to know which path ran.
"""
from __future__ import annotations

from collections import Counter
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import Literal

from assortment.utils.money import to_major


OutcomeStatus = Literal["selected", "empty", "failed"]
SolverPath = Literal["local", "remote"]


class FailureReason(str, Enum):
    """Why a solve request produced no selection."""
    INVALID_INPUT = "invalid_input"
    NO_COMBINATION_FOUND = "no_combination_found"
    REMOTE_TIMEOUT = "remote_timeout"
    REMOTE_PROTOCOL_ERROR = "remote_protocol_error"
    REMOTE_VALIDATION_FAILED = "remote_validation_failed"
    REMOTE_UNAVAILABLE = "remote_unavailable"
    INTERNAL_ERROR = "internal_error"


class SelectedUnit(BaseModel):
    """One unit of a catalog item; repeated entries mean repeated units."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    name: str = ""
    unit_price: float


class SelectionOutcome(BaseModel):
    """
    Terminal result of one solve request.

    - selected: `units` holds one entry per chosen unit (never empty)
    - empty: nothing needed (target rounds to zero)
    - failed: `reason` says why; `diagnostics` carries details for logs/UI
    """

    model_config = ConfigDict(extra="ignore")

    status: OutcomeStatus
    units: List[SelectedUnit] = Field(default_factory=list)
    reason: Optional[FailureReason] = None
    message: Optional[str] = None

    path: Optional[SolverPath] = None
    target_minor: Optional[int] = None
    total_minor: int = 0

    diagnostics: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def selected(
        cls,
        units: List[SelectedUnit],
        *,
        total_minor: int,
        target_minor: int,
        path: SolverPath,
        diagnostics: Optional[Dict[str, Any]] = None,
    ) -> "SelectionOutcome":
        return cls(
            status="selected",
            units=units,
            total_minor=total_minor,
            target_minor=target_minor,
            path=path,
            diagnostics=diagnostics or {},
        )

    @classmethod
    def empty(cls, *, target_minor: int = 0, message: Optional[str] = None) -> "SelectionOutcome":
        return cls(status="empty", target_minor=target_minor, message=message)

    @classmethod
    def failed(
        cls,
        reason: FailureReason,
        message: str,
        *,
        target_minor: Optional[int] = None,
        path: Optional[SolverPath] = None,
        diagnostics: Optional[Dict[str, Any]] = None,
    ) -> "SelectionOutcome":
        return cls(
            status="failed",
            reason=reason,
            message=message,
            target_minor=target_minor,
            path=path,
            diagnostics=diagnostics or {},
        )

    @property
    def ok(self) -> bool:
        return self.status != "failed"

    @property
    def total(self) -> Decimal:
        return to_major(self.total_minor)

    @property
    def distance_minor(self) -> Optional[int]:
        """Absolute gap between achieved total and target (None when unknown)."""
        if self.target_minor is None:
            return None
        return abs(self.total_minor - self.target_minor)

    def counts_by_id(self) -> Dict[str, int]:
        return dict(Counter(u.id for u in self.units))
