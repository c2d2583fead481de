"""
Shared fixtures: an app on in-memory SQLite with local media under tmp_path,
plus factories for users, videos and the like.
"""
import itertools
from datetime import timedelta

import pytest

from api import create_app
from models import storage
from models.comment import Comment
from models.like import Like, LikeTarget
from models.playlist import Playlist, PlaylistPrivacy
from models.tweet import Tweet
from models.user import User
from models.video import Video
from utils.security import TokenIssuer, hash_password

PASSWORD = "password123"


# =============================================================================
# Application
# =============================================================================


@pytest.fixture
def app(tmp_path):
    app = create_app(
        "testing",
        overrides={
            "MEDIA_ROOT": str(tmp_path / "media"),
            "UPLOAD_TEMP_DIR": str(tmp_path / "uploads"),
        },
    )
    with app.app_context():
        yield app
    storage.close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def session(app):
    return storage.get_session()


@pytest.fixture
def issuer(app) -> TokenIssuer:
    return app.extensions["token_issuer"]


@pytest.fixture
def media(app):
    return app.extensions["media_storage"]


@pytest.fixture
def short_lived_issuer() -> TokenIssuer:
    """Issuer whose tokens are already expired when minted."""
    return TokenIssuer(
        access_secret="a-secret",
        access_expires=timedelta(seconds=-10),
        refresh_secret="r-secret",
        refresh_expires=timedelta(seconds=-10),
    )


# =============================================================================
# Factories
# =============================================================================


@pytest.fixture
def make_user(session):
    counter = itertools.count(1)

    def _make(username=None, password=PASSWORD, **kwargs):
        n = next(counter)
        username = username or f"user{n}"
        user = User(
            username=username,
            email=kwargs.pop("email", f"{username}@example.com"),
            fullname=kwargs.pop("fullname", f"User {n}"),
            password_hash=hash_password(password),
            **kwargs,
        )
        session.add(user)
        session.commit()
        return user

    return _make


@pytest.fixture
def auth_headers(issuer):
    def _headers(user):
        return {"Authorization": f"Bearer {issuer.issue_access(user)}"}

    return _headers


@pytest.fixture
def make_video(session):
    counter = itertools.count(1)

    def _make(owner, published=True, **kwargs):
        n = next(counter)
        video = Video(
            owner_id=owner.id,
            title=kwargs.pop("title", f"Video {n}"),
            description=kwargs.pop("description", f"Description {n}"),
            video_url=f"/media/video-{n}.mp4",
            video_public_id=f"video-{n}.mp4",
            thumbnail_url=f"/media/thumb-{n}.png",
            thumbnail_public_id=f"thumb-{n}.png",
            duration=kwargs.pop("duration", 60.0),
            is_published=published,
            **kwargs,
        )
        session.add(video)
        session.commit()
        return video

    return _make


@pytest.fixture
def make_comment(session):
    def _make(owner, video, content="nice video", **kwargs):
        comment = Comment(owner_id=owner.id, video_id=video.id, content=content, **kwargs)
        session.add(comment)
        session.commit()
        return comment

    return _make


@pytest.fixture
def make_tweet(session):
    def _make(owner, content="hello"):
        tweet = Tweet(owner_id=owner.id, content=content)
        session.add(tweet)
        session.commit()
        return tweet

    return _make


@pytest.fixture
def make_playlist(session):
    def _make(owner, title="Favorites", privacy=PlaylistPrivacy.PUBLIC, videos=()):
        playlist = Playlist(owner_id=owner.id, title=title, privacy=privacy)
        playlist.videos.extend(videos)
        session.add(playlist)
        session.commit()
        return playlist

    return _make


@pytest.fixture
def like(session):
    def _like(user, target: LikeTarget):
        row = Like(liked_by_id=user.id, target=target)
        session.add(row)
        session.commit()
        return row

    return _like
