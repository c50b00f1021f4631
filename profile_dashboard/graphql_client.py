"""GraphQL client for the learning platform — one authenticated POST per call."""

from __future__ import annotations

import logging
from typing import Callable

import requests

from profile_dashboard.config import GRAPHQL_URL, REQUEST_TIMEOUT
from profile_dashboard.session import TokenStore

logger = logging.getLogger(__name__)

SESSION_EXPIRED_MESSAGE = "Session expired. Please login again."

# Statuses the platform uses to reject a bearer token
_AUTH_REJECTION_STATUSES = {401, 403}


class GraphQLError(Exception):
    """Base class for everything execute() can raise."""


class Unauthorized(GraphQLError):
    """No token is stored; the caller must send the user to the login view."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class SessionExpired(Unauthorized):
    """The server rejected the token. The store has already been cleared."""

    def __init__(self, message: str = SESSION_EXPIRED_MESSAGE):
        super().__init__(message)


class QueryFailed(GraphQLError):
    """The server answered with GraphQL errors or a malformed payload."""

    def __init__(self, message: str, errors: list | None = None):
        super().__init__(message)
        self.errors = errors or []


class TransportError(GraphQLError):
    """The request never produced a usable HTTP response."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def _format_errors(errors: list) -> str:
    """Join server error messages, prefixing extensions.code when present."""
    parts = []
    for err in errors:
        if not isinstance(err, dict):
            parts.append(str(err))
            continue
        message = err.get("message", "")
        code = (err.get("extensions") or {}).get("code")
        parts.append(f"{code}: {message}" if code else message)
    return ", ".join(parts)


class GraphQLClient:
    """Executes queries against a single GraphQL endpoint.

    Every call reads the current token from ``token_store`` and sends it as a
    bearer credential. No retries, no caching.

    ``on_session_expired`` is the navigation hook invoked after the token
    has been cleared because the server rejected it.
    """

    def __init__(
        self,
        token_store: TokenStore,
        url: str = GRAPHQL_URL,
        timeout: float = REQUEST_TIMEOUT,
        on_session_expired: Callable[[], None] | None = None,
    ) -> None:
        self.token_store = token_store
        self.url = url
        self.timeout = timeout
        self.on_session_expired = on_session_expired

    def execute(self, query: str, variables: dict | None = None) -> dict:
        """Run a query and return its ``data`` payload."""
        token = self.token_store.get()
        if not token:
            raise Unauthorized()

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
        }
        payload = {"query": query, "variables": variables or {}}

        try:
            resp = requests.post(self.url, headers=headers, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("GraphQL request to %s failed: %s", self.url, e)
            raise TransportError(f"GraphQL request failed: {e}") from e

        if resp.status_code in _AUTH_REJECTION_STATUSES:
            logger.warning("GraphQL endpoint rejected token (HTTP %d); clearing session", resp.status_code)
            self.token_store.clear()
            if self.on_session_expired is not None:
                self.on_session_expired()
            raise SessionExpired()

        try:
            body = resp.json()
        except ValueError as e:
            if not resp.ok:
                raise TransportError(
                    f"GraphQL endpoint returned HTTP {resp.status_code}",
                    status_code=resp.status_code,
                ) from e
            logger.error("Invalid JSON in GraphQL response")
            raise QueryFailed("Invalid response from server") from e

        if not isinstance(body, dict):
            raise QueryFailed("Invalid response from server")

        errors = body.get("errors")
        if errors:
            message = _format_errors(errors)
            logger.error("GraphQL response errors: %s", message)
            raise QueryFailed(f"GraphQL query failed: {message}", errors=errors)

        if not resp.ok:
            raise TransportError(
                f"GraphQL endpoint returned HTTP {resp.status_code}",
                status_code=resp.status_code,
            )

        data = body.get("data")
        if data is None:
            logger.error("GraphQL response has no data")
            raise QueryFailed("No data returned from GraphQL API")

        return data
