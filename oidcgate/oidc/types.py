"""Type definitions for the authorization code exchange."""

from pydantic import BaseModel, ConfigDict, SecretStr, field_serializer

from oidcgate.crypto.types import JWTPayload
from oidcgate.db.records import User


class TokenRequest(BaseModel):
    """JSON body POSTed to the provider's /oauth/token endpoint."""

    grant_type: str = "authorization_code"
    client_id: str
    client_secret: SecretStr
    code: str
    redirect_uri: str

    @field_serializer("client_secret", when_used="json")
    def _reveal_secret(self, value: SecretStr) -> str:
        return value.get_secret_value()


class TokenResponse(BaseModel):
    """Provider response to a successful code exchange."""

    model_config = ConfigDict(extra="ignore")

    access_token: str
    expires_in: int
    id_token: str
    token_type: str


class EstablishedLogin(BaseModel):
    """Outcome of a completed login: the new session and its owner."""

    session_key: str
    user: User
    payload: JWTPayload
