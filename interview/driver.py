"""Interview state machine: foundation, interviewing, reporting.

The driver owns one subject record and one question ledger at a time. Every
external call runs inside ``_transition`` which doubles as the session's
single-flight lock: a second transition attempted while a call is in flight
raises ``SessionBusyError`` instead of queueing.
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional, Tuple

from gateway import CancelToken
from observability import log_event, span
from services.reports import report_filename
from services.scoring import classify
from services.sessions import SessionContext

from .errors import (
    InterviewError,
    InvalidTransitionError,
    MissingSubjectError,
    RequestCancelledError,
    SessionBusyError,
    ValidationError,
)
from .ledger import QuestionLedger
from .models import (
    CATEGORIES,
    Category,
    CreateSubjectRequest,
    InterviewSnapshot,
    Phase,
    QuestionRequest,
    ReportArtifact,
    SubjectRecord,
)

logger = logging.getLogger(__name__)


class InterviewDriver:
    def __init__(self, session: SessionContext) -> None:
        self.session = session
        self.phase: Phase = "foundation"
        self.name = ""
        self.category: Category = "Other"
        self.subject: Optional[SubjectRecord] = None
        self.ledger: Optional[QuestionLedger] = None
        self.answers: Dict[str, str] = {}
        self.last_error: Optional[str] = None
        self._lock = threading.Lock()
        self._cancel: Optional[CancelToken] = None

    # ------------------------------------------------------------------
    # Locking & cancellation
    # ------------------------------------------------------------------
    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def _transition(self, action: str) -> Iterator[CancelToken]:
        if not self._lock.acquire(blocking=False):
            raise SessionBusyError(f"Cannot {action} while another request is in flight")
        token = CancelToken()
        self._cancel = token
        try:
            yield token
        finally:
            self._cancel = None
            self._lock.release()

    def cancel(self) -> bool:
        """Cancel the in-flight call, if any. Returns whether one was running."""

        token = self._cancel
        if token is None:
            return False
        token.cancel()
        self._event("cancel_requested")
        return True

    # ------------------------------------------------------------------
    # Foundation
    # ------------------------------------------------------------------
    def set_foundation(self, name: Optional[str] = None, category: Optional[str] = None) -> None:
        self._require_phase("foundation", "edit the product details")
        if self.busy:
            raise SessionBusyError("Cannot edit the product details while another request is in flight")
        if category is not None:
            if category not in CATEGORIES:
                raise ValidationError(f"Unknown category {category!r}; expected one of {', '.join(CATEGORIES)}")
            self.category = category  # type: ignore[assignment]
        if name is not None:
            self.name = name

    def submit_foundation(self) -> SubjectRecord:
        """Create the subject and open the interview with its first question."""

        self._require_phase("foundation", "begin the analysis")
        name = self.name.strip()
        if not name:
            raise ValidationError("Product name is required.")
        with self._transition("create the product") as cancel:
            token = self.session.bearer()
            request = CreateSubjectRequest(name=name, category=self.category, attributes={})
            with span(self.session, "create_product"):
                created = self.session.service.create_product(request, token=token, cancel=cancel)
            self.subject = created.model_copy(update={"attributes": {}, "score": None})
            self.name = created.name
            self.category = created.category
            self.ledger = QuestionLedger()
            self.answers = {}
            self.last_error = None
            self.phase = "interviewing"
            self._event("subject_created", subject_id=created.id)
            self._advance(cancel)
        return self.subject

    # ------------------------------------------------------------------
    # Interviewing
    # ------------------------------------------------------------------
    @property
    def current_question(self) -> Optional[str]:
        return self.ledger.current if self.ledger is not None else None

    def request_next_question(self) -> Optional[str]:
        """Fetch a question again after a failed fetch left none current."""

        self._require_phase("interviewing", "request a question")
        if self.current_question is not None:
            raise InvalidTransitionError("A question is already awaiting an answer.")
        with self._transition("request a question") as cancel:
            return self._advance(cancel)

    def submit_answer(self, answer: str) -> Optional[str]:
        """Record the answer to the current question and fetch the next one.

        Returns the next question, or ``None`` when the generator is exhausted
        (the driver is then in ``reporting``) or the fetch failed. A cancelled
        fetch raises; the answer stays recorded and ``request_next_question``
        resumes the interview.
        """

        self._require_phase("interviewing", "answer a question")
        if self.current_question is None:
            raise InvalidTransitionError("There is no question awaiting an answer.")
        if not isinstance(answer, str) or not answer.strip():
            raise ValidationError("Please provide an answer before proceeding.")
        with self._transition("submit an answer") as cancel:
            ledger, subject = self._in_progress()
            question = ledger.answer()
            self.answers[question] = answer
            self.subject = subject.model_copy(update={"attributes": {**subject.attributes, question: answer}})
            self._event("answer_recorded", question=question, asked=len(ledger.asked))
            return self._advance(cancel)

    def _in_progress(self) -> Tuple[QuestionLedger, SubjectRecord]:
        if self.ledger is None or self.subject is None:
            raise InvalidTransitionError("No interview is in progress.")
        return self.ledger, self.subject

    def _advance(self, cancel: CancelToken) -> Optional[str]:
        ledger, subject = self._in_progress()
        request = QuestionRequest(
            productName=subject.name,
            category=subject.category,
            attributes=dict(subject.attributes),
            previousAnswers=dict(self.answers),
            askedQuestions=list(ledger.asked),
        )
        try:
            with span(self.session, "generate_questions"):
                batch = self.session.service.generate_questions(
                    request, token=self.session.peek_token(), cancel=cancel
                )
        except RequestCancelledError:
            raise
        except InterviewError as exc:
            self.last_error = str(exc)
            logger.warning("question fetch failed: %s", exc)
            self._event("question_fetch_failed", level=logging.WARNING, error=str(exc))
            return None
        self.last_error = None
        ledger.receive(batch.questions)
        if ledger.is_exhausted():
            self._event("interview_exhausted", asked=len(ledger.asked))
            self._score(dict(self.answers), cancel)
            return None
        question = ledger.surface()
        self._event("question_surfaced", question=question, asked=len(ledger.asked))
        return question

    # ------------------------------------------------------------------
    # Scoring & reporting
    # ------------------------------------------------------------------
    def finalize_report(self, final_answers: Optional[Dict[str, str]] = None) -> SubjectRecord:
        """Send the answers to the scorer and enter ``reporting``.

        Raises:
            MissingSubjectError: If no subject was created; nothing is sent.
        """

        if self.subject is None:
            raise MissingSubjectError("Error: Product ID missing.")
        self._require_phase("interviewing", "generate the report")
        if self.current_question is not None:
            raise InvalidTransitionError("Answer the current question before generating the report.")
        answers = dict(self.answers) if final_answers is None else dict(final_answers)
        with self._transition("generate the report") as cancel:
            return self._score(answers, cancel)

    def _score(self, answers: Dict[str, str], cancel: CancelToken) -> SubjectRecord:
        subject = self.subject
        if subject is None:
            raise MissingSubjectError("Error: Product ID missing.")
        token = self.session.bearer()
        self._event("scoring_started", subject_id=subject.id, answered=len(answers))
        with span(self.session, "score_product"):
            result = self.session.service.score_product(subject.id, answers, token=token, cancel=cancel)
        record = result.product
        if record.score is None and result.score is not None:
            record = record.model_copy(update={"score": result.score})
        self.subject = record
        self.ledger = None
        self.phase = "reporting"
        self._event("scoring_done", subject_id=record.id, score=record.score)
        return record

    def fetch_report(self) -> ReportArtifact:
        if self.subject is None:
            raise MissingSubjectError("Error: Product ID missing.")
        self._require_phase("reporting", "download the report")
        if self.subject.score is None:
            raise InvalidTransitionError("The product has not been scored yet.")
        with self._transition("download the report") as cancel:
            token = self.session.bearer()
            with span(self.session, "fetch_report"):
                content = self.session.service.fetch_report(self.subject.id, token=token, cancel=cancel)
        artifact = ReportArtifact(filename=report_filename(self.subject.name), content=content)
        self._event("report_fetched", subject_id=self.subject.id)
        return artifact

    def reset(self) -> None:
        """Discard the finished analysis and return to ``foundation``."""

        self._require_phase("reporting", "start a new analysis")
        with self._transition("start a new analysis"):
            self.subject = None
            self.ledger = None
            self.answers = {}
            self.last_error = None
            self.name = ""
            self.category = "Other"
            self.phase = "foundation"
        self._event("reset")

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------
    def snapshot(self) -> InterviewSnapshot:
        ledger = self.ledger
        score = self.subject.score if self.subject is not None else None
        if self.phase == "reporting":
            progress = 1.0
        elif ledger is not None:
            progress = ledger.progress(self.session.settings.EXPECTED_QUESTIONS)
        else:
            progress = 0.0
        return InterviewSnapshot(
            session_id=self.session.session_id,
            phase=self.phase,
            name=self.name,
            category=self.category,
            subject_id=self.subject.id if self.subject is not None else None,
            current_question=self.current_question,
            asked=list(ledger.asked) if ledger is not None else [],
            pending=list(ledger.pending) if ledger is not None else [],
            answered=len(self.answers),
            progress=progress,
            exhausted=ledger.is_exhausted() if ledger is not None else self.phase == "reporting",
            busy=self.busy,
            score=score,
            classification=classify(score) if self.phase == "reporting" else None,
            last_error=self.last_error,
        )

    def _require_phase(self, phase: Phase, action: str) -> None:
        if self.phase != phase:
            raise InvalidTransitionError(f"Cannot {action} while {self.phase}")

    def _event(self, kind: str, **fields) -> None:
        payload = log_event(kind, self.session.session_id, phase=self.phase, **fields)
        self.session.events.append({key: value for key, value in payload.items() if key != "ts"})


__all__ = ["InterviewDriver"]
