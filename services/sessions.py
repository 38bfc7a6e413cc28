"""Session context, token storage and the session gate."""
from __future__ import annotations

import logging
import os
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from config.settings import Settings, settings as default_settings
from gateway import HttpClient, ProductService, ServiceRoute
from interview.errors import MissingTokenError

logger = logging.getLogger(__name__)


class TokenStore(Protocol):
    def get(self) -> Optional[str]: ...

    def set(self, token: str) -> None: ...

    def clear(self) -> None: ...


class MemoryTokenStore:
    """Token held for the lifetime of the process."""

    def __init__(self, token: Optional[str] = None) -> None:
        self._token = token or None

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        self._token = token or None

    def clear(self) -> None:
        self._token = None


class FileTokenStore:
    """Token persisted in a single file, readable only by the owner."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    def get(self) -> Optional[str]:
        try:
            token = self._path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        return token or None

    def set(self, token: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(token.strip(), encoding="utf-8")
        os.chmod(self._path, 0o600)

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)


@dataclass
class SessionContext:
    """Everything one interview session owns, passed explicitly to the driver."""

    token_store: TokenStore
    service: ProductService
    settings: Settings
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    events: List[Dict[str, Any]] = field(default_factory=list)

    def bearer(self) -> str:
        token = self.token_store.get()
        if not token:
            raise MissingTokenError("Please log in first.")
        return token

    def peek_token(self) -> Optional[str]:
        return self.token_store.get()


def default_token_store(cfg: Settings) -> TokenStore:
    """Seed from ``AUTH_TOKEN`` when set, otherwise use the token file."""

    if cfg.AUTH_TOKEN:
        return MemoryTokenStore(cfg.AUTH_TOKEN)
    return FileTokenStore(Path(cfg.TOKEN_FILE).expanduser())


def open_session(
    token_store: Optional[TokenStore] = None,
    *,
    cfg: Optional[Settings] = None,
    client: Optional[HttpClient] = None,
) -> SessionContext:
    """Gate entry to an interview on the presence of a token.

    Raises:
        MissingTokenError: If the store holds no token.
    """

    cfg = cfg or default_settings
    store = token_store if token_store is not None else default_token_store(cfg)
    if not store.get():
        logger.warning("session gate rejected: no token present")
        raise MissingTokenError("Please log in first.")
    service = ProductService(ServiceRoute.from_settings(cfg), client=client)
    return SessionContext(token_store=store, service=service, settings=cfg)


def logout(token_store: TokenStore) -> None:
    token_store.clear()


__all__ = [
    "FileTokenStore",
    "MemoryTokenStore",
    "SessionContext",
    "TokenStore",
    "default_token_store",
    "logout",
    "open_session",
]
