# assortment/schemas/validation.py
"""
Validation report schemas for untrusted solver output.
Used to check a remote solver's answer against the real inventory before it
is accepted as a selection.
"""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


Severity = Literal["error", "warning"]


class ValidationIssue(BaseModel):
    """A single validation issue (error or warning)."""
    model_config = ConfigDict(extra="ignore")

    severity: Severity
    code: str
    message: str

    item_ids: List[str] = Field(default_factory=list)
    details: Dict[str, Any] = Field(default_factory=dict)


class ValidationReport(BaseModel):
    """
    Structured validation report.
    Attached to failed outcomes so callers can see exactly which units were rejected.
    """
    model_config = ConfigDict(extra="ignore")

    is_valid: bool
    errors: List[ValidationIssue] = Field(default_factory=list)
    warnings: List[ValidationIssue] = Field(default_factory=list)
    summary: str = ""
    details: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_issues(cls, issues: List[ValidationIssue], details: Optional[Dict[str, Any]] = None) -> "ValidationReport":
        """Build a report from a list of issues, auto-calculating validity."""
        errors = [i for i in issues if i.severity == "error"]
        warnings = [i for i in issues if i.severity == "warning"]
        is_valid = len(errors) == 0
        summary = (
            f"valid ({len(warnings)} warnings)" if is_valid else f"invalid ({len(errors)} errors, {len(warnings)} warnings)"
        )
        return cls(is_valid=is_valid, errors=errors, warnings=warnings, summary=summary, details=details or {})
