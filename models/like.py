"""
Like model.

A like points at exactly one target. Instead of three nullable foreign keys
the target is stored as a (kind, id) pair and surfaced in Python as the
LikeTarget value type, so a like can never reference two things at once.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sqlalchemy import Column, String, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from sqlalchemy.types import Enum as SAEnum

from models.base_model import BaseModel, Base


class LikeKind(str, Enum):
    VIDEO = "video"
    COMMENT = "comment"
    TWEET = "tweet"


@dataclass(frozen=True)
class LikeTarget:
    kind: LikeKind
    id: str

    @classmethod
    def video(cls, target_id: str) -> "LikeTarget":
        return cls(LikeKind.VIDEO, target_id)

    @classmethod
    def comment(cls, target_id: str) -> "LikeTarget":
        return cls(LikeKind.COMMENT, target_id)

    @classmethod
    def tweet(cls, target_id: str) -> "LikeTarget":
        return cls(LikeKind.TWEET, target_id)


class Like(BaseModel, Base):
    __tablename__ = "likes"

    liked_by_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    target_kind = Column(SAEnum(LikeKind, name="like_kind", native_enum=False), nullable=False)
    # no FK: the referenced table depends on target_kind, cleanup happens in the services
    target_id = Column(String(36), nullable=False)

    liked_by = relationship("User")

    __table_args__ = (
        UniqueConstraint("liked_by_id", "target_kind", "target_id", name="uq_likes_actor_target"),
        Index("ix_likes_target", "target_kind", "target_id"),
    )

    @property
    def target(self) -> LikeTarget:
        return LikeTarget(LikeKind(self.target_kind), self.target_id)

    @target.setter
    def target(self, value: LikeTarget) -> None:
        self.target_kind = value.kind
        self.target_id = value.id
