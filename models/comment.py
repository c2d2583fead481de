from sqlalchemy import Column, String, Text, ForeignKey
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base, OwnedMixin


class Comment(OwnedMixin, BaseModel, Base):
    __tablename__ = "comments"

    content = Column(Text, nullable=False)
    video_id = Column(
        String(36),
        ForeignKey("videos.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    video = relationship("Video")
