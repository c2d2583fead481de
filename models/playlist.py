from enum import Enum

from sqlalchemy import Column, String, Text, Integer, Table, ForeignKey, DateTime, Index
from sqlalchemy.orm import relationship
from sqlalchemy.types import Enum as SAEnum

from models.base_model import BaseModel, Base, OwnedMixin, utcnow


class PlaylistPrivacy(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    UNLISTED = "unlisted"


# Association table with CASCADE so entries vanish with either side
playlist_videos = Table(
    "playlist_videos",
    Base.metadata,
    Column("playlist_id", String(36), ForeignKey("playlists.id", ondelete="CASCADE"), primary_key=True),
    Column("video_id", String(36), ForeignKey("videos.id", ondelete="CASCADE"), primary_key=True),
    Column("added_at", DateTime(timezone=True), default=utcnow, nullable=False),
)


class Playlist(OwnedMixin, BaseModel, Base):
    __tablename__ = "playlists"

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    privacy = Column(
        SAEnum(PlaylistPrivacy, name="playlist_privacy", native_enum=False),
        nullable=False,
        default=PlaylistPrivacy.PUBLIC,
    )
    views = Column(Integer, nullable=False, default=0)

    videos = relationship(
        "Video",
        secondary=playlist_videos,
        order_by=playlist_videos.c.added_at,
    )

    __table_args__ = (
        Index("ix_playlists_owner_privacy", "owner_id", "privacy"),
    )
