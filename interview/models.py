"""Pydantic models for subjects and the external service payloads."""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator

Category = Literal["Other", "Food", "Cosmetics", "Apparel", "Electronics"]
CATEGORIES: tuple[str, ...] = get_args(Category)

Phase = Literal["foundation", "interviewing", "reporting"]


class SubjectRecord(BaseModel):
    """Product being interviewed, as stored by the registry."""

    id: str = Field(alias="_id")
    name: str = Field(min_length=1)
    category: Category = "Other"
    questions: List[str] = Field(default_factory=list)
    attributes: Dict[str, Any] = Field(default_factory=dict)
    score: Optional[float] = Field(default=None, alias="transparencyScore", ge=0, le=100)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value


class CreateSubjectRequest(BaseModel):
    name: str
    category: Category
    attributes: Dict[str, Any] = Field(default_factory=dict)


class QuestionRequest(BaseModel):
    """Generator input; field names follow the wire format."""

    productName: str
    category: Category
    attributes: Dict[str, Any] = Field(default_factory=dict)
    previousAnswers: Dict[str, str] = Field(default_factory=dict)
    askedQuestions: List[str] = Field(default_factory=list)


class QuestionBatch(BaseModel):
    questions: List[str] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")

    @field_validator("questions", mode="before")
    @classmethod
    def _null_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("questions", mode="after")
    @classmethod
    def _drop_blank(cls, value: List[str]) -> List[str]:
        return [question.strip() for question in value if question.strip()]


class ScoreResult(BaseModel):
    product: SubjectRecord
    score: Optional[float] = Field(default=None, ge=0, le=100)

    model_config = ConfigDict(extra="ignore")


class ReportArtifact(BaseModel):
    filename: str
    content: bytes
    media_type: str = "application/pdf"


class InterviewSnapshot(BaseModel):
    """Serializable view of a driver for presentation layers."""

    session_id: str
    phase: Phase
    name: str
    category: Category
    subject_id: Optional[str] = None
    current_question: Optional[str] = None
    asked: List[str] = Field(default_factory=list)
    pending: List[str] = Field(default_factory=list)
    answered: int = 0
    progress: float = 0.0
    exhausted: bool = False
    busy: bool = False
    score: Optional[float] = None
    classification: Optional[str] = None
    last_error: Optional[str] = None


__all__ = [
    "CATEGORIES",
    "Category",
    "CreateSubjectRequest",
    "InterviewSnapshot",
    "Phase",
    "QuestionBatch",
    "QuestionRequest",
    "ReportArtifact",
    "ScoreResult",
    "SubjectRecord",
]
