import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config.settings import Settings
from gateway import ProductService, ServiceRoute
from interview.driver import InterviewDriver
from services.sessions import MemoryTokenStore, SessionContext


class StubBackend:
    """In-process stand-in for the registry, generator, scorer and report endpoints."""

    def __init__(self) -> None:
        self.batches: List[Optional[List[str]]] = []
        self.score: float = 82
        self.report_bytes = b"%PDF-1.4\n% stub report\n"
        self.failures: Dict[str, Tuple[int, Any]] = {}
        self.requests: List[Tuple[str, Any, Dict[str, str]]] = []
        self.products: Dict[str, Dict[str, Any]] = {}
        self.client = TestClient(self._build())

    def calls(self, route: str) -> List[Tuple[str, Any, Dict[str, str]]]:
        return [entry for entry in self.requests if entry[0] == route]

    def _failure(self, route: str) -> Optional[Response]:
        if route not in self.failures:
            return None
        status, body = self.failures[route]
        if isinstance(body, (dict, list)):
            return JSONResponse(body, status_code=status)
        return Response(content=str(body), status_code=status, media_type="text/plain")

    def _build(self) -> FastAPI:
        app = FastAPI()

        @app.post("/api/products")
        async def create_product(request: Request):
            body = await request.json()
            self.requests.append(("create", body, dict(request.headers)))
            failed = self._failure("create")
            if failed is not None:
                return failed
            product_id = f"p-{len(self.products) + 1}"
            product = {
                "_id": product_id,
                "name": body["name"],
                "category": body["category"],
                "questions": [],
                "attributes": body.get("attributes", {}),
            }
            self.products[product_id] = product
            return product

        @app.post("/generate-questions")
        async def generate_questions(request: Request):
            body = await request.json()
            self.requests.append(("generate", body, dict(request.headers)))
            failed = self._failure("generate")
            if failed is not None:
                return failed
            batch = self.batches.pop(0) if self.batches else []
            return {"questions": batch}

        @app.post("/api/products/{product_id}/score")
        async def score_product(product_id: str, request: Request):
            body = await request.json()
            self.requests.append(("score", body, dict(request.headers)))
            failed = self._failure("score")
            if failed is not None:
                return failed
            product = dict(self.products[product_id])
            product["attributes"] = body
            product["transparencyScore"] = self.score
            self.products[product_id] = product
            return {"product": product, "score": self.score}

        @app.get("/api/products/{product_id}/report")
        async def report(product_id: str, request: Request):
            self.requests.append(("report", product_id, dict(request.headers)))
            failed = self._failure("report")
            if failed is not None:
                return failed
            return Response(content=self.report_bytes, media_type="application/pdf")

        return app


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        API_BASE_URL="http://testserver",
        AUTH_TOKEN=None,
        TOKEN_FILE=str(tmp_path / "token"),
        REPORT_DIR=str(tmp_path / "reports"),
    )


@pytest.fixture
def backend() -> StubBackend:
    return StubBackend()


@pytest.fixture
def session(backend, test_settings) -> SessionContext:
    service = ProductService(ServiceRoute.from_settings(test_settings), client=backend.client)
    return SessionContext(token_store=MemoryTokenStore("tok-123"), service=service, settings=test_settings)


@pytest.fixture
def driver(session) -> InterviewDriver:
    return InterviewDriver(session)
