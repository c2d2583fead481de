from sqlalchemy import Column, String

from models.base_model import BaseModel, Base, OwnedMixin

MAX_TWEET_LENGTH = 280


class Tweet(OwnedMixin, BaseModel, Base):
    __tablename__ = "tweets"

    content = Column(String(MAX_TWEET_LENGTH), nullable=False)
