from __future__ import annotations  # Error taxonomy for interview sessions

from typing import Optional


class InterviewError(RuntimeError):  # Base error surfaced to the respondent
    pass


class ValidationError(InterviewError):  # Missing name or answer; nothing was sent
    pass


class TransportError(InterviewError):  # Network failure before a response arrived
    pass


class RequestTimeoutError(TransportError):  # Bounded wait elapsed
    pass


class RequestCancelledError(InterviewError):  # Transition cancelled by its token
    pass


class ServerError(InterviewError):  # Non-2xx reply or unusable payload
    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MissingSubjectError(InterviewError):  # Finalize or report without a subject
    pass


class MissingTokenError(InterviewError):  # Session gate precondition failed
    pass


class SessionBusyError(InterviewError):  # Another call is still in flight
    pass


class InvalidTransitionError(InterviewError):  # Operation not allowed in this phase
    pass


class LedgerError(InterviewError):  # Question ledger misuse
    pass


__all__ = [
    "InterviewError",
    "InvalidTransitionError",
    "LedgerError",
    "MissingSubjectError",
    "MissingTokenError",
    "RequestCancelledError",
    "RequestTimeoutError",
    "ServerError",
    "SessionBusyError",
    "TransportError",
    "ValidationError",
]
