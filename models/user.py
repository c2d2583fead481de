from models.base_model import Base, BaseModel, utcnow
from sqlalchemy import Column, String, Text, Table, DateTime, ForeignKey


# Composite PK gives the history set semantics: a video is recorded once per user
watch_history = Table(
    "watch_history",
    Base.metadata,
    Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("video_id", String(36), ForeignKey("videos.id", ondelete="CASCADE"), primary_key=True),
    Column("watched_at", DateTime(timezone=True), default=utcnow, nullable=False),
)


class User(BaseModel, Base):
    __tablename__ = "users"
    username = Column(String(64), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    fullname = Column(String(128), nullable=False)
    avatar_url = Column(String(1024), nullable=True)
    avatar_public_id = Column(String(255), nullable=True)
    cover_image_url = Column(String(1024), nullable=True)
    cover_image_public_id = Column(String(255), nullable=True)
    password_hash = Column(String(255), nullable=False)
    # the one refresh token currently accepted for this user; None when logged out
    refresh_token = Column(Text, nullable=True)

    @property
    def password(self):
        raise AttributeError("Password: Write-only field")
