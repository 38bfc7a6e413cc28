from __future__ import annotations  # HTTP request gateway for the product services

import logging
import threading
from typing import Any, Callable, Dict, Optional, Protocol, Tuple, Type, TypeVar

import httpx
from pydantic import BaseModel, Field
from pydantic import ValidationError as SchemaValidationError

from config.settings import Settings
from interview.errors import RequestCancelledError, RequestTimeoutError, ServerError, TransportError


logger = logging.getLogger(__name__)  # Module logger setup


class HttpResponse(Protocol):  # Minimal HTTP response protocol
    @property
    def status_code(self) -> int: ...

    @property
    def text(self) -> str: ...

    @property
    def content(self) -> bytes: ...

    def json(self) -> Any: ...


class HttpClient(Protocol):  # Minimal HTTP client protocol (httpx.Client, TestClient)
    def request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Any = None,
    ) -> HttpResponse: ...


class ServiceRoute(BaseModel):  # Endpoint configuration for the product services
    base_url: str
    timeout_s: float = Field(gt=0)
    report_timeout_s: float = Field(gt=0)
    generator_sends_auth: bool = False

    @classmethod
    def from_settings(cls, cfg: Settings) -> "ServiceRoute":
        return cls(
            base_url=cfg.API_BASE_URL,
            timeout_s=cfg.REQUEST_TIMEOUT_S,
            report_timeout_s=cfg.REPORT_TIMEOUT_S,
            generator_sends_auth=cfg.GENERATOR_SENDS_AUTH,
        )


class CancelToken:  # Cooperative cancellation flag for one transition
    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, what: str) -> None:
        if self._event.is_set():
            raise RequestCancelledError(f"{what} was cancelled")


T = TypeVar("T", bound=BaseModel)


def call(
    method: str,
    path: str,
    *,
    route: ServiceRoute,
    payload: Any = None,
    token: Optional[str] = None,
    client: Optional[HttpClient] = None,
    cancel: Optional[CancelToken] = None,
    timeout: Optional[float] = None,
) -> HttpResponse:  # Send one request and map failures onto the error taxonomy
    what = f"{method} {path}"
    wait = timeout if timeout is not None else route.timeout_s
    if cancel is not None:
        cancel.raise_if_cancelled(what)
    headers = {"Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    url = f"{route.base_url.rstrip('/')}{path}"
    logger.info("request send %s auth=%s timeout=%.1fs", what, bool(token), wait)
    try:
        response, close_cb = _send(method, url, payload, headers, wait, client)
    except httpx.TimeoutException as exc:
        logger.error("request timed out %s after %.1fs", what, wait)
        raise RequestTimeoutError(f"{what} timed out after {wait:.1f}s") from exc
    except Exception as exc:  # noqa: BLE001
        logger.error("transport failure %s: %s", what, exc)
        raise TransportError(str(exc) or f"{what} failed") from exc
    try:
        if cancel is not None:
            # the reply is discarded so the caller keeps its pre-call state
            cancel.raise_if_cancelled(what)
        if not 200 <= response.status_code < 300:
            message = _error_message(response)
            logger.error("request failed %s status=%s error=%s", what, response.status_code, message)
            raise ServerError(message, status_code=response.status_code)
    finally:
        _close_safely(close_cb)
    logger.info("request done %s status=%s", what, response.status_code)
    return response


def call_json(
    method: str,
    path: str,
    schema: Type[T],
    **kwargs: Any,
) -> T:  # Send a request and validate the JSON reply against ``schema``
    response = call(method, path, **kwargs)
    try:
        data = response.json()
    except Exception as exc:  # noqa: BLE001
        logger.error("reply was not JSON %s %s: %s", method, path, exc)
        raise ServerError("Server reply was not JSON", status_code=response.status_code) from exc
    try:
        return schema.model_validate(data)
    except SchemaValidationError as exc:
        logger.error("reply failed validation %s %s: %s", method, path, exc)
        raise ServerError(
            f"Server reply did not match {schema.__name__}", status_code=response.status_code
        ) from exc


def call_bytes(method: str, path: str, **kwargs: Any) -> bytes:  # Fetch an opaque binary body
    return call(method, path, **kwargs).content


def _send(
    method: str,
    url: str,
    payload: Any,
    headers: Dict[str, str],
    timeout: float,
    client: Optional[HttpClient],
) -> Tuple[HttpResponse, Optional[Callable[[], None]]]:  # Dispatch HTTP request
    if client is not None:
        return client.request(method, url, json=payload, headers=headers, timeout=timeout), None
    http_client = httpx.Client(timeout=timeout)
    try:
        response = http_client.request(method, url, json=payload, headers=headers)
    except BaseException:
        http_client.close()
        raise
    return response, http_client.close


def _close_safely(close_cb: Optional[Callable[[], None]]) -> None:  # Close HTTP client callback when provided
    if close_cb is not None:
        close_cb()


def _error_message(response: HttpResponse) -> str:  # Prefer the server's ``error`` field
    try:
        data = response.json()
    except Exception:  # noqa: BLE001
        data = None
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, str) and error.strip():
            return error.strip()
    return f"Request failed with status code {response.status_code}"


__all__ = [
    "CancelToken",
    "HttpClient",
    "HttpResponse",
    "ServiceRoute",
    "call",
    "call_bytes",
    "call_json",
]
