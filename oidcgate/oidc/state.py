"""CSRF state generation and callback verification."""

import secrets
import string

from oidcgate.core.errors import StateMismatchError, StateMissingError

STATE_COOKIE = "state"
STATE_LENGTH = 32
_ALPHABET = string.ascii_letters + string.digits


def generate_state() -> str:
    """Random alphanumeric CSRF token (about 190 bits)."""
    return "".join(secrets.choice(_ALPHABET) for _ in range(STATE_LENGTH))


def check_state(cookie_state: str | None, query_state: str | None) -> None:
    """Require the callback ``state`` to echo the cookie exactly."""
    if not cookie_state or query_state is None:
        raise StateMissingError()
    if not secrets.compare_digest(cookie_state.encode(), query_state.encode()):
        raise StateMismatchError()
