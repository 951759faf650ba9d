"""RS256 ID-token verification against the provisioned signing key."""

import logging
import math
import time
from typing import Any

import jwt
from jwt.types import Options
from pydantic import ValidationError

from oidcgate.core.errors import (
    AudienceMismatchError,
    ExpiredError,
    IssuerMismatchError,
    MalformedJWTError,
)
from oidcgate.crypto.types import JWTPayload

logger = logging.getLogger(__name__)

# Claim checks are done below, in a fixed order, so PyJWT only verifies
# structure and signature.
_DECODE_OPTIONS: Options = {
    "verify_signature": True,
    "verify_exp": False,
    "verify_nbf": False,
    "verify_iat": False,
    "verify_aud": False,
    "verify_iss": False,
}


def _payload_from_claims(claims: dict[str, Any]) -> JWTPayload:
    """Pick the required claims; the user id falls back to ``sub``."""
    exp = claims.get("exp")
    # NumericDate may carry a fraction; sessions store whole seconds.
    if isinstance(exp, float) and math.isfinite(exp):
        exp = math.floor(exp)
    data = {
        "email": claims.get("email"),
        "user_id": claims.get("user_id", claims.get("sub")),
        "exp": exp,
        "iss": claims.get("iss"),
        "aud": claims.get("aud"),
    }
    try:
        return JWTPayload.model_validate(data, strict=True)
    except ValidationError as exc:
        raise MalformedJWTError(repr(claims)) from exc


def _audience_matches(aud: str | list[str], expected: str) -> bool:
    if isinstance(aud, list):
        return expected in aud
    return aud == expected


def validate_id_token(
    signing_key_pem: bytes,
    token: str,
    audience: str,
    domain: str,
    now: int | None = None,
) -> JWTPayload:
    """Decode an ID token and enforce signature, expiry, audience, issuer.

    Raises the matching AuthError subclass on the first failed check.
    """
    try:
        claims = jwt.decode(
            token,
            signing_key_pem,
            algorithms=["RS256"],
            options=_DECODE_OPTIONS,
        )
    except jwt.PyJWTError as exc:
        logger.debug("ID token rejected: %s", exc)
        raise MalformedJWTError(token) from exc

    payload = _payload_from_claims(claims)

    current = int(time.time()) if now is None else now
    if payload.exp <= current:
        raise ExpiredError()
    if not _audience_matches(payload.aud, audience):
        raise AudienceMismatchError()
    if payload.iss != f"https://{domain}/":
        raise IssuerMismatchError()
    return payload
