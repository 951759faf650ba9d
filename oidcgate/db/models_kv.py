"""SQLAlchemy model backing the byte-keyed store."""

from sqlalchemy import LargeBinary
from sqlalchemy.orm import Mapped, mapped_column

from oidcgate.db.base import BaseEntity

KEY_MAX_LENGTH = 512


class KVEntryEntity(BaseEntity):
    """One key/value pair; both sides are opaque bytes."""

    __tablename__ = "kv_entries"

    key: Mapped[bytes] = mapped_column(LargeBinary(KEY_MAX_LENGTH), primary_key=True)
    value: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
