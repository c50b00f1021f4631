"""Session token stores.

A store holds at most one bearer token. Absence of the token means
"logged out". Three backends share the same get/set/clear surface:

- MemoryTokenStore — in-process, used by tests and embedding code
- FileTokenStore — JSON file on disk, used by the export command
- CookieTokenStore — the browser's ``jwt_token`` cookie; writes are
  recorded and applied to the outgoing response by the web layer
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path

from fastapi import Request, Response

from profile_dashboard.config import COOKIE_SECURE, TOKEN_COOKIE_NAME

logger = logging.getLogger(__name__)

TOKEN_KEY = "jwt_token"


class TokenStore:
    """Interface shared by all token stores."""

    def get(self) -> str | None:
        raise NotImplementedError

    def set(self, token: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError

    def has_token(self) -> bool:
        return bool(self.get())


class MemoryTokenStore(TokenStore):
    def __init__(self, token: str | None = None) -> None:
        self._token = token or None
        self._lock = threading.Lock()

    def get(self) -> str | None:
        with self._lock:
            return self._token

    def set(self, token: str) -> None:
        with self._lock:
            self._token = token

    def clear(self) -> None:
        with self._lock:
            self._token = None


class FileTokenStore(TokenStore):
    """Token persisted as ``{"jwt_token": "..."}`` in a JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def get(self) -> str | None:
        with self._lock:
            if not self.path.exists():
                return None
            try:
                data = json.loads(self.path.read_text())
            except (json.JSONDecodeError, OSError) as e:
                logger.warning("Unreadable token file %s: %s", self.path, e)
                return None
            token = data.get(TOKEN_KEY) if isinstance(data, dict) else None
            return token or None

    def set(self, token: str) -> None:
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps({TOKEN_KEY: token}))
            try:
                self.path.chmod(0o600)
            except OSError:
                logger.warning("Could not restrict permissions on %s", self.path)

    def clear(self) -> None:
        with self._lock:
            self.path.unlink(missing_ok=True)


class CookieTokenStore(TokenStore):
    """Request-scoped view of the browser's token cookie.

    Reads come from the incoming request; set/clear are remembered and
    written to a response with ``apply()``.
    """

    _UNCHANGED = object()

    def __init__(self, token: str | None = None, cookie_name: str = TOKEN_COOKIE_NAME) -> None:
        self.cookie_name = cookie_name
        self._token = token or None
        self._pending = self._UNCHANGED
        self._lock = threading.Lock()

    @classmethod
    def from_request(cls, request: Request, cookie_name: str = TOKEN_COOKIE_NAME) -> "CookieTokenStore":
        return cls(request.cookies.get(cookie_name), cookie_name=cookie_name)

    def get(self) -> str | None:
        with self._lock:
            return self._token

    def set(self, token: str) -> None:
        with self._lock:
            self._token = token
            self._pending = token

    def clear(self) -> None:
        with self._lock:
            self._token = None
            self._pending = None

    @property
    def changed(self) -> bool:
        return self._pending is not self._UNCHANGED

    def apply(self, response: Response) -> Response:
        """Write any pending set/clear onto the response."""
        if self._pending is self._UNCHANGED:
            return response
        if self._pending is None:
            response.delete_cookie(self.cookie_name, path="/")
        else:
            response.set_cookie(
                self.cookie_name,
                self._pending,
                httponly=True,
                samesite="lax",
                secure=COOKIE_SECURE,
                path="/",
            )
        return response
