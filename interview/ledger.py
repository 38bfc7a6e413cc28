"""Question bookkeeping for a single interview session."""
from __future__ import annotations

from typing import List, Optional, Sequence

from .errors import LedgerError


class QuestionLedger:
    """Track asked, pending and current questions.

    A question that has been asked is never queued or surfaced again.
    """

    def __init__(self) -> None:
        self.asked: List[str] = []
        self.pending: List[str] = []
        self.current: Optional[str] = None
        self._exhausted = False

    def receive(self, candidates: Sequence[str]) -> None:
        """Queue a generator batch ahead of older look-ahead candidates."""

        self._exhausted = not candidates
        fresh: List[str] = []
        for question in candidates:
            if question in self.asked or question == self.current or question in fresh:
                continue
            fresh.append(question)
        leftovers = [question for question in self.pending if question not in fresh]
        self.pending = fresh + leftovers
        if not self.pending:
            # nothing new and nothing buffered: the generator has run dry
            self._exhausted = True

    def surface(self) -> Optional[str]:
        if self.current is not None:
            raise LedgerError(f"Question still awaiting an answer: {self.current!r}")
        if not self.pending:
            return None
        question = self.pending.pop(0)
        self.mark_asked(question)
        self.current = question
        return question

    def mark_asked(self, question: str) -> None:
        if question not in self.asked:
            self.asked.append(question)

    def answer(self) -> str:
        """Clear and return the current question."""

        if self.current is None:
            raise LedgerError("No question is awaiting an answer")
        question = self.current
        self.current = None
        return question

    def is_exhausted(self) -> bool:
        return self._exhausted

    def progress(self, expected: int) -> float:
        if expected <= 0:
            return 1.0
        return min(1.0, len(self.asked) / expected)


__all__ = ["QuestionLedger"]
