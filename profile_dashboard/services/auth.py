"""Sign-in against the platform — HTTP Basic credentials exchanged for a bearer token."""

import json
import logging

import requests

from profile_dashboard.config import REQUEST_TIMEOUT, SIGNIN_URL
from profile_dashboard.session import TokenStore

logger = logging.getLogger(__name__)


class AuthenticationFailed(Exception):
    """Bad credentials, unreachable sign-in endpoint, or no token in the reply."""


def _extract_token(body: str) -> str:
    """Pull the token out of a text or JSON response body."""
    text = body.strip()
    try:
        parsed = json.loads(text)
    except ValueError:
        parsed = None

    if isinstance(parsed, str):
        text = parsed
    elif isinstance(parsed, dict):
        text = parsed.get("token") or parsed.get("jwt") or ""

    # Remove surrounding quotes if present
    return str(text).strip().strip('"').strip()


def login(identifier: str, password: str, token_store: TokenStore,
          url: str = SIGNIN_URL, timeout: float = REQUEST_TIMEOUT) -> str:
    """Exchange credentials for a token and store it.

    Returns the token. Raises AuthenticationFailed on any failure; the store
    is left untouched in that case.
    """
    identifier = (identifier or "").strip()
    password = (password or "").strip()
    if not identifier or not password:
        raise AuthenticationFailed("Username/email and password are required.")

    try:
        resp = requests.post(url, auth=(identifier, password), timeout=timeout)
    except requests.RequestException as e:
        logger.error("Sign-in request failed: %s", e)
        raise AuthenticationFailed("Could not reach the sign-in server.") from e

    if not resp.ok:
        logger.info("Sign-in rejected for %s (HTTP %d)", identifier, resp.status_code)
        raise AuthenticationFailed("Invalid username/email or password.")

    token = _extract_token(resp.text)
    if not token:
        raise AuthenticationFailed("Token not received from server.")

    token_store.set(token)
    logger.info("Signed in as %s", identifier)
    return token


def logout(token_store: TokenStore) -> None:
    token_store.clear()
