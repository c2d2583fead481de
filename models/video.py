from sqlalchemy import Column, String, Text, Integer, Float, Boolean, CheckConstraint, Index

from models.base_model import BaseModel, Base, OwnedMixin


class Video(OwnedMixin, BaseModel, Base):
    __tablename__ = "videos"

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    video_url = Column(String(1024), nullable=False)
    video_public_id = Column(String(255), nullable=False)
    thumbnail_url = Column(String(1024), nullable=False)
    thumbnail_public_id = Column(String(255), nullable=False)
    duration = Column(Float, nullable=False, default=0)  # seconds, as reported by the media backend
    views = Column(Integer, nullable=False, default=0)
    is_published = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        CheckConstraint("views >= 0", name="ck_videos_views_nonnegative"),
        Index("ix_videos_title", "title"),
        Index("ix_videos_owner_published", "owner_id", "is_published"),
    )

    def is_visible_to(self, viewer_id) -> bool:
        """Drafts are visible to their owner only."""
        return bool(self.is_published) or self.is_owned_by(viewer_id)
