import pytest

from interview.errors import LedgerError
from interview.ledger import QuestionLedger


def test_head_of_batch_becomes_current_and_rest_is_buffered():
    ledger = QuestionLedger()
    ledger.receive(["Q1", "Q2", "Q3"])

    assert ledger.surface() == "Q1"
    assert ledger.current == "Q1"
    assert ledger.asked == ["Q1"]
    assert ledger.pending == ["Q2", "Q3"]
    assert not ledger.is_exhausted()


def test_mark_asked_is_idempotent():
    ledger = QuestionLedger()
    ledger.mark_asked("Q1")
    ledger.mark_asked("Q1")
    assert ledger.asked == ["Q1"]


def test_surface_while_current_is_occupied_raises():
    ledger = QuestionLedger()
    ledger.receive(["Q1", "Q2"])
    ledger.surface()
    with pytest.raises(LedgerError):
        ledger.surface()
    assert ledger.current == "Q1"


def test_answer_clears_current():
    ledger = QuestionLedger()
    ledger.receive(["Q1"])
    ledger.surface()
    assert ledger.answer() == "Q1"
    assert ledger.current is None
    with pytest.raises(LedgerError):
        ledger.answer()


def test_empty_batch_means_exhausted_even_with_buffered_questions():
    ledger = QuestionLedger()
    ledger.receive(["Q1", "Q2"])
    ledger.surface()
    ledger.answer()
    ledger.receive([])
    assert ledger.is_exhausted()
    assert ledger.pending == ["Q2"]


def test_new_batch_is_surfaced_ahead_of_older_candidates():
    ledger = QuestionLedger()
    ledger.receive(["Q1", "Q2"])
    ledger.surface()
    ledger.answer()
    ledger.receive(["Q3", "Q4"])
    assert ledger.surface() == "Q3"
    assert ledger.pending == ["Q4", "Q2"]


def test_asked_questions_are_never_requeued():
    ledger = QuestionLedger()
    ledger.receive(["Q1", "Q2"])
    ledger.surface()
    ledger.answer()
    ledger.receive(["Q1"])

    assert not ledger.is_exhausted()
    assert ledger.surface() == "Q2"
    assert ledger.asked == ["Q1", "Q2"]


def test_batch_of_only_repeats_with_nothing_buffered_is_exhausted():
    ledger = QuestionLedger()
    ledger.receive(["Q1"])
    ledger.surface()
    ledger.answer()
    ledger.receive(["Q1", "Q1"])
    assert ledger.is_exhausted()
    assert ledger.surface() is None


def test_duplicates_within_a_batch_are_collapsed():
    ledger = QuestionLedger()
    ledger.receive(["Q1", "Q1", "Q2"])
    assert ledger.pending == ["Q1", "Q2"]


def test_progress_is_clamped():
    ledger = QuestionLedger()
    assert ledger.progress(5) == 0.0
    for index in range(7):
        ledger.mark_asked(f"Q{index}")
    assert ledger.progress(5) == 1.0
    ledger = QuestionLedger()
    ledger.mark_asked("Q1")
    assert ledger.progress(4) == pytest.approx(0.25)
