import io
import logging
import os
import uuid

import pytest
from sqlalchemy import select

from models.comment import Comment
from models.like import Like, LikeTarget
from models.playlist import Playlist, playlist_videos
from models.user import watch_history
from models.video import Video
from services.base import PageRequest
from services.videos import VideoService
from utils.exceptions import DependencyError, ForbiddenError, ValidationError
from utils.media import LocalMediaStorage

BASE = "/api/v1/videos"


class FailingDeleteStorage(LocalMediaStorage):
    def delete(self, public_id, resource_type="image"):
        raise DependencyError("remote store unavailable")


@pytest.fixture
def videos(session, media):
    return VideoService(session, media)


def _stage(tmp_path, name, content=b"bytes"):
    path = tmp_path / name
    path.write_bytes(content)
    return str(path)


# =============================================================================
# Upload
# =============================================================================


class TestPublish:
    def test_multipart_upload_creates_a_draft(self, client, make_user, auth_headers, media):
        resp = client.post(
            BASE,
            data={
                "title": "My first video",
                "description": "Testing",
                "videoFile": (io.BytesIO(b"video-bytes"), "clip.mp4"),
                "thumbnail": (io.BytesIO(b"image-bytes"), "thumb.png"),
            },
            headers=auth_headers(make_user()),
            content_type="multipart/form-data",
        )
        assert resp.status_code == 201
        data = resp.get_json()["data"]
        assert data["is_published"] is False
        assert data["views"] == 0
        assert os.path.exists(os.path.join(media.root, data["video_url"].rsplit("/", 1)[1]))
        assert os.path.exists(os.path.join(media.root, data["thumbnail_url"].rsplit("/", 1)[1]))

    def test_missing_thumbnail(self, videos, make_user, tmp_path):
        staged = _stage(tmp_path, "clip.mp4")
        with pytest.raises(ValidationError, match="Thumbnail"):
            videos.publish(make_user().id, {"title": "t", "description": "d"}, staged, None)
        assert not os.path.exists(staged)

    def test_missing_title(self, videos, make_user, tmp_path):
        with pytest.raises(ValidationError):
            videos.publish(
                make_user().id,
                {"description": "d"},
                _stage(tmp_path, "clip.mp4"),
                _stage(tmp_path, "thumb.png"),
            )

    def test_wrong_video_extension(self, client, make_user, auth_headers):
        resp = client.post(
            BASE,
            data={
                "title": "t",
                "description": "d",
                "videoFile": (io.BytesIO(b"x"), "clip.txt"),
                "thumbnail": (io.BytesIO(b"x"), "thumb.png"),
            },
            headers=auth_headers(make_user()),
            content_type="multipart/form-data",
        )
        assert resp.status_code == 400


# =============================================================================
# Reading
# =============================================================================


class TestGet:
    def test_every_read_counts_a_view(self, videos, session, make_user, make_video):
        video = make_video(make_user())
        for _ in range(3):
            videos.get(video.id)
        session.expire_all()
        assert session.get(Video, video.id).views == 3

    def test_watch_history_is_a_set(self, videos, session, make_user, make_video):
        viewer = make_user()
        video = make_video(make_user())
        videos.get(video.id, viewer.id)
        videos.get(video.id, viewer.id)

        rows = session.execute(
            select(watch_history.c.video_id).where(watch_history.c.user_id == viewer.id)
        ).all()
        assert [r.video_id for r in rows] == [video.id]

    def test_unpublished_is_forbidden_to_others(self, videos, make_user, make_video):
        video = make_video(make_user(), published=False)
        with pytest.raises(ForbiddenError):
            videos.get(video.id, make_user().id)
        with pytest.raises(ForbiddenError):
            videos.get(video.id)

    def test_owner_reads_draft_without_counting(self, videos, make_user, make_video):
        owner = make_user()
        video = make_video(owner, published=False)
        assert videos.get(video.id, owner.id)["views"] == 0

    def test_list_hides_drafts_and_searches(self, videos, make_user, make_video):
        owner = make_user()
        make_video(owner, title="Cooking pasta")
        make_video(owner, title="Gardening", description="Growing PASTA herbs")
        make_video(owner, title="Pasta draft", published=False)
        make_video(owner, title="Unrelated")

        page = videos.list(query="pasta")
        assert page["total"] == 2

        own = videos.list(user_id=owner.id, viewer_id=owner.id)
        assert own["total"] == 4

    def test_list_sort_by_views(self, videos, make_user, make_video):
        owner = make_user()
        make_video(owner, title="low", views=1)
        make_video(owner, title="high", views=50)
        page = videos.list(request=PageRequest(sort_by="views", descending=True))
        assert [v["title"] for v in page["items"]] == ["high", "low"]


# =============================================================================
# Mutations
# =============================================================================


class TestMutations:
    def test_toggle_publish(self, videos, make_user, make_video):
        owner = make_user()
        video = make_video(owner, published=False)
        assert videos.toggle_publish(owner.id, video.id) == {"is_published": True}
        assert videos.toggle_publish(owner.id, video.id) == {"is_published": False}

    def test_stranger_cannot_toggle(self, videos, make_user, make_video):
        with pytest.raises(ForbiddenError):
            videos.toggle_publish(make_user().id, make_video(make_user()).id)

    def test_update_replaces_thumbnail(self, videos, media, make_user, make_video, tmp_path):
        owner = make_user()
        video = make_video(owner)
        old = os.path.join(media.root, video.thumbnail_public_id)
        with open(old, "wb") as fh:
            fh.write(b"old")

        updated = videos.update(owner.id, video.id, {"title": "Renamed"}, thumbnail_path=_stage(tmp_path, "new.png"))
        assert updated["title"] == "Renamed"
        assert updated["thumbnail_url"].endswith("new.png")
        assert not os.path.exists(old)

    def test_stranger_update_with_bad_payload_is_forbidden(self, videos, make_user, make_video):
        with pytest.raises(ForbiddenError):
            videos.update(make_user().id, make_video(make_user()).id, {"title": ""})


# =============================================================================
# Delete
# =============================================================================


class TestDelete:
    def test_delete_cascades(self, videos, session, make_user, make_video, make_comment, make_playlist, like):
        owner = make_user()
        fan = make_user()
        video = make_video(owner)
        keep = make_video(owner)
        comment = make_comment(fan, video)
        like(fan, LikeTarget.video(video.id))
        like(owner, LikeTarget.comment(comment.id))
        like(fan, LikeTarget.video(keep.id))
        playlist = make_playlist(fan, videos=[video, keep])
        videos.get(video.id, fan.id)
        video_id, comment_id, keep_id, playlist_id = video.id, comment.id, keep.id, playlist.id

        videos.delete(owner.id, video_id)

        assert session.get(Video, video_id) is None
        assert session.query(Comment).filter_by(video_id=video_id).count() == 0
        assert session.query(Like).filter(Like.target_id.in_([video_id, comment_id])).count() == 0
        assert session.query(Like).filter_by(target_id=keep_id).count() == 1
        assert session.execute(select(watch_history).where(watch_history.c.video_id == video_id)).first() is None
        assert session.execute(
            select(playlist_videos).where(playlist_videos.c.video_id == video_id)
        ).first() is None
        assert [v.id for v in session.get(Playlist, playlist_id).videos] == [keep_id]

    def test_media_cleanup_failure_is_logged_not_raised(self, session, make_user, make_video, tmp_path, caplog):
        owner = make_user()
        video_id = make_video(owner).id
        service = VideoService(session, FailingDeleteStorage(str(tmp_path / "media")))

        with caplog.at_level(logging.WARNING, logger="utils.media"):
            service.delete(owner.id, video_id)

        assert session.get(Video, video_id) is None
        assert "Could not delete media" in caplog.text

    def test_stranger_cannot_delete(self, client, make_user, make_video, auth_headers):
        video = make_video(make_user())
        resp = client.delete(f"{BASE}/{video.id}", headers=auth_headers(make_user()))
        assert resp.status_code == 403

    def test_unknown_and_malformed_ids(self, client, make_user, auth_headers):
        headers = auth_headers(make_user())
        assert client.delete(f"{BASE}/{uuid.uuid4()}", headers=headers).status_code == 404
        assert client.delete(f"{BASE}/nope", headers=headers).status_code == 400
