"""Provisioning of the identity provider's signing certificate."""

import logging

import httpx
from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey

from oidcgate.core.errors import ProvisionError, SigningKeyMissingError
from oidcgate.crypto.types import SigningKeyMaterial
from oidcgate.db.kv_store import (
    JWT_CERT_DER,
    JWT_PUB_KEY_DER,
    JWT_PUB_KEY_PEM,
    KeyValueStore,
)

logger = logging.getLogger(__name__)


def certificate_url(domain: str) -> str:
    return f"https://{domain}/pem"


async def fetch_signing_certificate(domain: str, client: httpx.AsyncClient) -> str:
    """Download the PEM signing certificate published by the provider."""
    url = certificate_url(domain)
    try:
        resp = await client.get(url)
        resp.raise_for_status()
    except httpx.HTTPError as exc:
        raise ProvisionError(f"could not fetch {url}: {exc}") from exc
    return resp.text


def extract_key_material(pem_cert: str) -> SigningKeyMaterial:
    """Parse an X.509 PEM certificate into its stored key forms."""
    try:
        cert = x509.load_pem_x509_certificate(pem_cert.encode())
    except ValueError as exc:
        raise ProvisionError("x509 parse failed") from exc

    public_key = cert.public_key()
    if not isinstance(public_key, RSAPublicKey):
        raise ProvisionError("signing certificate does not carry an RSA key")

    return SigningKeyMaterial(
        public_key_pem=public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        ),
        public_key_der=public_key.public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        ),
        certificate_der=cert.public_bytes(serialization.Encoding.DER),
    )


async def provision_signing_keys(
    store: KeyValueStore, domain: str, client: httpx.AsyncClient
) -> SigningKeyMaterial:
    """Fetch the provider certificate and overwrite the stored key material."""
    material = extract_key_material(await fetch_signing_certificate(domain, client))
    await store.set(JWT_PUB_KEY_PEM, material.public_key_pem)
    await store.set(JWT_PUB_KEY_DER, material.public_key_der)
    await store.set(JWT_CERT_DER, material.certificate_der)
    logger.info("Provisioned signing key from %s", certificate_url(domain))
    return material


async def load_signing_key_pem(store: KeyValueStore) -> bytes:
    """Return the provisioned PEM public key."""
    pem = await store.get(JWT_PUB_KEY_PEM)
    if pem is None:
        raise SigningKeyMissingError()
    return pem
