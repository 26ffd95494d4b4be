# assortment/errors.py
"""
Exception hierarchy for the selection engine.

Each error carries the FailureReason it maps to, so the dispatcher can turn
any of them into a typed failed outcome without a lookup table.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from assortment.schemas.selection import FailureReason


class AssortmentError(Exception):
    """Base exception for this project."""

    reason: FailureReason = FailureReason.INTERNAL_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details: Dict[str, Any] = details or {}


class InvalidInputError(AssortmentError, ValueError):
    """Raised for a non-finite/negative target or a malformed catalog entry."""

    reason = FailureReason.INVALID_INPUT


class RemoteTimeoutError(AssortmentError):
    """Raised when the remote solver does not answer within the configured bound."""

    reason = FailureReason.REMOTE_TIMEOUT


class RemoteProtocolError(AssortmentError):
    """Raised when the remote solver answers with an unexpected shape."""

    reason = FailureReason.REMOTE_PROTOCOL_ERROR

    def __init__(self, message: str, raw_payload: Any = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.raw_payload = raw_payload


class RemoteValidationError(AssortmentError):
    """Raised when a well-formed remote answer disagrees with the inventory."""

    reason = FailureReason.REMOTE_VALIDATION_FAILED


class RemoteUnavailableError(AssortmentError):
    """Raised when the remote path was chosen but no backend could serve it."""

    reason = FailureReason.REMOTE_UNAVAILABLE


__all__ = [
    "AssortmentError",
    "InvalidInputError",
    "RemoteTimeoutError",
    "RemoteProtocolError",
    "RemoteValidationError",
    "RemoteUnavailableError",
]
