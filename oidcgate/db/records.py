"""Records persisted in the key-value store and their byte encoding."""

import time
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from oidcgate.core.errors import DeserializationError, SerializationError


ModelT = TypeVar("ModelT", bound=BaseModel)


class User(BaseModel):
    """A provider-scoped user, created once per user_id."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    email: str


class Session(BaseModel):
    """Server-side login session keyed by the hash of its ID token."""

    model_config = ConfigDict(
        frozen=True, ser_json_bytes="base64", val_json_bytes="base64"
    )

    user_id: str
    expires: int
    raw_token: bytes

    def expired(self, now: int | None = None) -> bool:
        """True once the current time reaches ``expires``."""
        current = int(time.time()) if now is None else now
        return self.expires <= current


def encode_record(record: BaseModel, name: str) -> bytes:
    try:
        return record.model_dump_json().encode()
    except (ValueError, TypeError) as exc:
        raise SerializationError(name) from exc


def decode_record(raw: bytes, model: type[ModelT], name: str) -> ModelT:
    """Decode bytes read from the store into ``model``."""
    try:
        return model.model_validate_json(raw)
    except ValidationError as exc:
        raise DeserializationError(name) from exc
