"""Type definitions for signing key material and ID-token claims."""

from pydantic import BaseModel, ConfigDict


class SigningKeyMaterial(BaseModel):
    """The provider's public signing key in its three stored forms."""

    model_config = ConfigDict(frozen=True)

    public_key_pem: bytes
    public_key_der: bytes
    certificate_der: bytes


class JWTPayload(BaseModel):
    """Claims of a verified ID token that the login flow relies on."""

    email: str
    user_id: str
    exp: int
    iss: str
    aud: str | list[str]
