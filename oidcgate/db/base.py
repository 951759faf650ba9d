"""Declarative base for oidcgate SQLAlchemy models."""

from sqlalchemy.orm import DeclarativeBase


class BaseEntity(DeclarativeBase):
    """Base class for all oidcgate database entities."""
