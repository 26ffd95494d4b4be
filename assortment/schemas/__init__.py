from .catalog import CatalogItem
from .selection import FailureReason, OutcomeStatus, SelectedUnit, SelectionOutcome, SolverPath
from .validation import ValidationIssue, ValidationReport
from .remote import RemoteCandidateItem, RemoteSolveRequest, RemoteUnit
from .invoice import InvoiceDraft, InvoiceLine

__all__ = [
	"CatalogItem",
	"FailureReason",
	"OutcomeStatus",
	"SelectedUnit",
	"SelectionOutcome",
	"SolverPath",
	"ValidationIssue",
	"ValidationReport",
	"RemoteCandidateItem",
	"RemoteSolveRequest",
	"RemoteUnit",
	"InvoiceDraft",
	"InvoiceLine",
]
