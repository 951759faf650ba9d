"""Error taxonomy for login, session and boot failures."""

from enum import StrEnum

HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401
HTTP_FORBIDDEN = 403
HTTP_INTERNAL_SERVER_ERROR = 500


class AuthErrorKind(StrEnum):
    """Closed set of reasons a login attempt can fail."""

    MALFORMED_JWT = "malformed_jwt"
    EXPIRED = "expired"
    AUDIENCE_MISMATCH = "audience_mismatch"
    ISSUER_MISMATCH = "issuer_mismatch"
    STATE_MISSING = "state_missing"
    STATE_MISMATCH = "state_mismatch"
    TOKEN_EXCHANGE_REJECTED = "token_exchange_rejected"
    TOKEN_EXCHANGE_FAILED = "token_exchange_failed"
    SIGNING_KEY_MISSING = "signing_key_missing"


class AuthError(Exception):
    """A recoverable login failure, tagged with its kind."""

    kind: AuthErrorKind

    def __init__(self, kind: AuthErrorKind, detail: str = "") -> None:
        super().__init__(detail or kind.value)
        self.kind = kind
        self.detail = detail


class MalformedJWTError(AuthError):
    """Token failed to decode, verify, or carry the required claims."""

    def __init__(self, representation: str) -> None:
        super().__init__(AuthErrorKind.MALFORMED_JWT, "malformed token")
        self.representation = representation


class ExpiredError(AuthError):
    def __init__(self) -> None:
        super().__init__(AuthErrorKind.EXPIRED)


class AudienceMismatchError(AuthError):
    def __init__(self) -> None:
        super().__init__(AuthErrorKind.AUDIENCE_MISMATCH)


class IssuerMismatchError(AuthError):
    def __init__(self) -> None:
        super().__init__(AuthErrorKind.ISSUER_MISMATCH)


class StateMissingError(AuthError):
    def __init__(self) -> None:
        super().__init__(AuthErrorKind.STATE_MISSING)


class StateMismatchError(AuthError):
    def __init__(self) -> None:
        super().__init__(AuthErrorKind.STATE_MISMATCH)


class TokenExchangeRejectedError(AuthError):
    """The provider refused the authorization code."""

    def __init__(self, status_code: int) -> None:
        super().__init__(
            AuthErrorKind.TOKEN_EXCHANGE_REJECTED,
            f"token endpoint returned status={status_code}",
        )
        self.status_code = status_code


class TokenExchangeFailedError(AuthError):
    """Transport or decoding failure talking to the token endpoint."""

    def __init__(self, detail: str) -> None:
        super().__init__(AuthErrorKind.TOKEN_EXCHANGE_FAILED, detail)


class SigningKeyMissingError(AuthError):
    def __init__(self) -> None:
        super().__init__(AuthErrorKind.SIGNING_KEY_MISSING, "no signing key stored")


class SerializationError(Exception):
    """A record could not be encoded for the store."""

    def __init__(self, name: str) -> None:
        super().__init__(f"could not serialize {name}")
        self.name = name


class DeserializationError(Exception):
    """Bytes read from the store did not decode into a record."""

    def __init__(self, name: str) -> None:
        super().__init__(f"could not deserialize {name}")
        self.name = name


class ConfigMissingError(Exception):
    """Required configuration is absent at boot."""

    def __init__(self, name: str) -> None:
        super().__init__(f"{name} must be set in your environment")
        self.name = name


class ProvisionError(Exception):
    """The provider signing certificate could not be fetched or parsed."""


def status_for_error(exc: Exception) -> int:
    """Map a login failure to a coarse HTTP status."""
    if not isinstance(exc, AuthError):
        return HTTP_INTERNAL_SERVER_ERROR
    match exc.kind:
        case AuthErrorKind.MALFORMED_JWT | AuthErrorKind.STATE_MISSING:
            return HTTP_BAD_REQUEST
        case (
            AuthErrorKind.EXPIRED
            | AuthErrorKind.AUDIENCE_MISMATCH
            | AuthErrorKind.ISSUER_MISMATCH
            | AuthErrorKind.TOKEN_EXCHANGE_REJECTED
        ):
            return HTTP_UNAUTHORIZED
        case AuthErrorKind.STATE_MISMATCH:
            return HTTP_FORBIDDEN
        case _:
            return HTTP_INTERNAL_SERVER_ERROR
