"""Test support: signing keys, token minting, and a fake identity provider."""

import json
import time
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from functools import lru_cache

import httpx
import jwt
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

DOMAIN = "example.auth"
ISSUER = f"https://{DOMAIN}/"
CLIENT_ID = "client123"
CLIENT_SECRET = "s3cret-value"
REDIRECT_URI = "https://app.test/callback"
USER_ID = "auth0|user-1"
EMAIL = "alice@example.com"
TOKEN_TTL = 3600


@lru_cache(maxsize=None)
def rsa_private_key(label: str) -> rsa.RSAPrivateKey:
    """A 2048-bit RSA key, generated once per label."""
    del label
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


def private_key_pem(key: rsa.RSAPrivateKey) -> bytes:
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


def public_key_pem(key: rsa.RSAPrivateKey) -> bytes:
    return key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def self_signed_cert_pem(key: rsa.RSAPrivateKey) -> str:
    """Self-signed certificate, the shape the provider serves at /pem."""
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, DOMAIN)])
    now = datetime.now(UTC)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=365))
        .sign(key, hashes.SHA256())
    )
    return cert.public_bytes(serialization.Encoding.PEM).decode()


def mint_token(
    key: rsa.RSAPrivateKey | None = None,
    *,
    drop: tuple[str, ...] = (),
    **overrides: object,
) -> str:
    """Sign an ID token; claims default to a valid login for USER_ID."""
    claims: dict[str, object] = {
        "email": EMAIL,
        "user_id": USER_ID,
        "exp": int(time.time()) + TOKEN_TTL,
        "iss": ISSUER,
        "aud": CLIENT_ID,
    }
    claims.update(overrides)
    for name in drop:
        claims.pop(name, None)
    return jwt.encode(
        claims, private_key_pem(key or rsa_private_key("provider")), algorithm="RS256"
    )


def token_response(id_token: str) -> dict[str, object]:
    return {
        "access_token": "opaque-access-token",
        "expires_in": TOKEN_TTL,
        "id_token": id_token,
        "token_type": "Bearer",
    }


class FakeProvider:
    """Stands in for the identity provider's /pem and /oauth/token endpoints."""

    def __init__(
        self,
        id_token: Callable[[], str] | None = None,
        cert_pem: str | None = None,
    ) -> None:
        self.id_token = id_token or mint_token
        self.cert_pem = cert_pem or self_signed_cert_pem(rsa_private_key("provider"))
        self.token_status = 200
        self.token_body: bytes | None = None
        self.token_requests: list[dict[str, object]] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.host != DOMAIN:
            return httpx.Response(404)
        if request.method == "GET" and request.url.path == "/pem":
            return httpx.Response(200, text=self.cert_pem)
        if request.method == "POST" and request.url.path == "/oauth/token":
            self.token_requests.append(json.loads(request.content))
            if self.token_body is not None:
                return httpx.Response(self.token_status, content=self.token_body)
            if self.token_status != 200:
                return httpx.Response(
                    self.token_status,
                    json={"error": "access_denied", "error_description": "Unauthorized"},
                )
            return httpx.Response(200, json=token_response(self.id_token()))
        return httpx.Response(404)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)
