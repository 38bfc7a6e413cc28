"""Transparency score classification helpers."""
from __future__ import annotations

from typing import Literal, Optional

Band = Literal["low", "mid", "high"]

EXCELLENT_THRESHOLD = 75.0
MODERATE_THRESHOLD = 50.0

_LABELS = {
    "high": "Excellent transparency practices",
    "mid": "Moderate transparency",
    "low": "Limited transparency disclosure",
}


def band(score: float) -> Band:
    """Map a 0-100 score onto low/mid/high."""

    if score >= EXCELLENT_THRESHOLD:
        return "high"
    if score >= MODERATE_THRESHOLD:
        return "mid"
    return "low"


def classify(score: Optional[float]) -> Optional[str]:
    """Return the respondent-facing description for ``score``."""

    if score is None:
        return None
    return _LABELS[band(score)]


__all__ = ["Band", "EXCELLENT_THRESHOLD", "MODERATE_THRESHOLD", "band", "classify"]
