"""Client for the product registry, question generator, scorer and report endpoints."""
from __future__ import annotations

from typing import Dict, Optional
from urllib.parse import quote

from interview.models import CreateSubjectRequest, QuestionBatch, QuestionRequest, ScoreResult, SubjectRecord

from .http import CancelToken, HttpClient, ServiceRoute, call_bytes, call_json


class ProductService:
    """Thin typed wrapper over the four external endpoints.

    Every method raises the gateway's ``TransportError``/``ServerError``
    family; none of them retries.
    """

    def __init__(self, route: ServiceRoute, *, client: Optional[HttpClient] = None) -> None:
        self.route = route
        self.client = client

    def create_product(
        self,
        request: CreateSubjectRequest,
        *,
        token: str,
        cancel: Optional[CancelToken] = None,
    ) -> SubjectRecord:
        return call_json(
            "POST",
            "/api/products",
            SubjectRecord,
            route=self.route,
            payload=request.model_dump(),
            token=token,
            client=self.client,
            cancel=cancel,
        )

    def generate_questions(
        self,
        request: QuestionRequest,
        *,
        token: Optional[str] = None,
        cancel: Optional[CancelToken] = None,
    ) -> QuestionBatch:
        return call_json(
            "POST",
            "/generate-questions",
            QuestionBatch,
            route=self.route,
            payload=request.model_dump(),
            token=token if self.route.generator_sends_auth else None,
            client=self.client,
            cancel=cancel,
        )

    def score_product(
        self,
        subject_id: str,
        answers: Dict[str, str],
        *,
        token: str,
        cancel: Optional[CancelToken] = None,
    ) -> ScoreResult:
        return call_json(
            "POST",
            f"/api/products/{quote(subject_id, safe='')}/score",
            ScoreResult,
            route=self.route,
            payload=dict(answers),
            token=token,
            client=self.client,
            cancel=cancel,
        )

    def fetch_report(
        self,
        subject_id: str,
        *,
        token: str,
        cancel: Optional[CancelToken] = None,
    ) -> bytes:
        return call_bytes(
            "GET",
            f"/api/products/{quote(subject_id, safe='')}/report",
            route=self.route,
            token=token,
            client=self.client,
            cancel=cancel,
            timeout=self.route.report_timeout_s,
        )


__all__ = ["ProductService"]
