from __future__ import annotations  # Re-export gateway public API

from .http import CancelToken, HttpClient, HttpResponse, ServiceRoute, call, call_bytes, call_json
from .services import ProductService

__all__ = [
    "CancelToken",
    "HttpClient",
    "HttpResponse",
    "ProductService",
    "ServiceRoute",
    "call",
    "call_bytes",
    "call_json",
]
