#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixins for the Video Platform API.

- UUID primary key (String(36)) with defaults
- created_at / updated_at timestamps stamped in Python (UTC, microseconds)
- OwnedMixin for every entity that belongs to a user

Notes:
- Timestamps are set client-side so that rows inserted within the same second
  still have a stable creation order (SQLite CURRENT_TIMESTAMP is per-second).
"""

from __future__ import annotations

from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import declarative_base, declared_attr, relationship

# Declarative base for all models
Base = declarative_base()


def _uuid_str() -> str:
    """Return a canonical UUIDv4 string (36 chars, with hyphens)."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel:
    """
    Base mixin for all persistent models.

    - id, created_at, updated_at
    - kwargs constructor, so tests can pin created_at explicitly
    """

    id = Column(String(36), primary_key=True, default=_uuid_str, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    def __init__(self, *args, **kwargs):
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)
        # Ensure an id exists if user passed none
        if getattr(self, "id", None) is None:
            self.id = _uuid_str()

    def __str__(self) -> str:
        """Human-friendly representation including id and fields."""
        return f"[{self.__class__.__name__}] ({self.id}) {self.__dict__}"


class OwnedMixin:
    """
    Adds an immutable owner reference plus an eagerly joined `owner`
    relationship, so every read of an owned row carries the owner profile.
    """

    @declared_attr
    def owner_id(cls):
        return Column(
            String(36),
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )

    @declared_attr
    def owner(cls):
        return relationship("User", lazy="joined")

    def is_owned_by(self, user_id) -> bool:
        return user_id is not None and str(self.owner_id) == str(user_id)
