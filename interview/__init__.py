"""Subject records, question ledger and error taxonomy for interviews."""
from .errors import (
    InterviewError,
    InvalidTransitionError,
    LedgerError,
    MissingSubjectError,
    MissingTokenError,
    RequestCancelledError,
    RequestTimeoutError,
    ServerError,
    SessionBusyError,
    TransportError,
    ValidationError,
)
from .ledger import QuestionLedger
from .models import CATEGORIES, Category, InterviewSnapshot, Phase, ReportArtifact, SubjectRecord

__all__ = [
    "CATEGORIES",
    "Category",
    "InterviewError",
    "InterviewSnapshot",
    "InvalidTransitionError",
    "LedgerError",
    "MissingSubjectError",
    "MissingTokenError",
    "Phase",
    "QuestionLedger",
    "ReportArtifact",
    "RequestCancelledError",
    "RequestTimeoutError",
    "ServerError",
    "SessionBusyError",
    "SubjectRecord",
    "TransportError",
    "ValidationError",
]
