import io
import os

import pytest

from models.user import User
from services.users import UserService
from utils.exceptions import DependencyError, NotFoundError, ValidationError
from utils.media import LocalMediaStorage
from utils.security import verify_password

BASE = "/api/v1/users"


class RejectingStorage(LocalMediaStorage):
    """Local storage that refuses files whose name contains `reject`."""

    def __init__(self, root, reject):
        super().__init__(root)
        self.reject = reject

    def upload(self, local_path):
        if self.reject in os.path.basename(local_path):
            os.remove(local_path)
            raise DependencyError("Error while uploading media")
        return super().upload(local_path)


@pytest.fixture
def users(session, issuer, media):
    return UserService(session, issuer, media)


# =============================================================================
# Registration
# =============================================================================


class TestRegister:
    def test_register_json(self, client, session):
        resp = client.post(
            f"{BASE}/register",
            json={"fullname": "Ada L", "email": "Ada@Example.com", "username": " Ada ", "password": "password123"},
        )
        assert resp.status_code == 201
        body = resp.get_json()
        assert body["success"] is True
        assert body["data"]["username"] == "ada"
        assert body["data"]["email"] == "ada@example.com"
        assert "password" not in body["data"]

        stored = session.query(User).filter_by(username="ada").one()
        assert verify_password("password123", stored.password_hash)

    def test_register_multipart_with_avatar(self, client, media):
        resp = client.post(
            f"{BASE}/register",
            data={
                "fullname": "Bob",
                "email": "bob@example.com",
                "username": "bob",
                "password": "password123",
                "avatar": (io.BytesIO(b"png-bytes"), "me.png"),
            },
            content_type="multipart/form-data",
        )
        assert resp.status_code == 201
        avatar_url = resp.get_json()["data"]["avatar_url"]
        assert avatar_url.startswith("/media/")
        assert os.path.exists(os.path.join(media.root, avatar_url.rsplit("/", 1)[1]))

    @pytest.mark.parametrize("missing", ["fullname", "email", "username", "password"])
    def test_required_fields(self, users, missing):
        payload = {"fullname": "X", "email": "x@example.com", "username": "xx_x", "password": "password123"}
        payload.pop(missing)
        with pytest.raises(ValidationError):
            users.register(payload)

    def test_short_password(self, users):
        with pytest.raises(ValidationError):
            users.register({"fullname": "X", "email": "x@example.com", "username": "xxx", "password": "short"})

    @pytest.mark.parametrize("clash", [{"username": "taken"}, {"email": "taken@example.com"}])
    def test_duplicate_username_or_email(self, users, make_user, clash):
        make_user("taken")
        payload = {"fullname": "Y", "email": "new@example.com", "username": "newbie", "password": "password123"}
        payload.update(clash)
        with pytest.raises(ValidationError, match="already exists"):
            users.register(payload)

    def test_rejected_registration_discards_staged_files(self, users, tmp_path):
        staged = tmp_path / "staged.png"
        staged.write_bytes(b"img")
        with pytest.raises(ValidationError):
            users.register({"username": "z"}, avatar_path=str(staged))
        assert not staged.exists()

    def test_failed_avatar_upload_discards_staged_cover(self, session, issuer, tmp_path):
        users = UserService(session, issuer, RejectingStorage(str(tmp_path / "media"), reject="avatar"))
        avatar = tmp_path / "avatar.png"
        cover = tmp_path / "cover.png"
        avatar.write_bytes(b"a")
        cover.write_bytes(b"c")

        with pytest.raises(DependencyError):
            users.register(
                {"fullname": "C", "email": "c@example.com", "username": "carol", "password": "password123"},
                avatar_path=str(avatar),
                cover_image_path=str(cover),
            )

        assert not cover.exists()
        assert session.query(User).filter_by(username="carol").count() == 0

    def test_failed_cover_upload_removes_stored_avatar(self, session, issuer, tmp_path):
        media_root = tmp_path / "media"
        users = UserService(session, issuer, RejectingStorage(str(media_root), reject="cover"))
        avatar = tmp_path / "avatar.png"
        cover = tmp_path / "cover.png"
        avatar.write_bytes(b"a")
        cover.write_bytes(b"c")

        with pytest.raises(DependencyError):
            users.register(
                {"fullname": "D", "email": "d@example.com", "username": "dave", "password": "password123"},
                avatar_path=str(avatar),
                cover_image_path=str(cover),
            )

        assert os.listdir(media_root) == []
        assert session.query(User).filter_by(username="dave").count() == 0

    def test_concurrent_duplicate_is_a_validation_error(self, users, session, make_user, monkeypatch, tmp_path):
        make_user("racer")
        # the other registration commits between our check and our insert
        monkeypatch.setattr(users, "_identity_taken", lambda username, email: False)
        avatar = tmp_path / "avatar.png"
        avatar.write_bytes(b"a")

        with pytest.raises(ValidationError, match="already exists"):
            users.register(
                {"fullname": "R", "email": "racer@example.com", "username": "racer", "password": "password123"},
                avatar_path=str(avatar),
            )

        assert os.listdir(users.media.root) == []
        assert session.query(User).filter_by(username="racer").count() == 1


# =============================================================================
# Account
# =============================================================================


class TestAccount:
    def test_change_password(self, users, session, make_user):
        user = make_user()
        users.change_password(user.id, {"old_password": "password123", "new_password": "new-password-1"})
        assert verify_password("new-password-1", session.get(User, user.id).password_hash)

    def test_change_password_wrong_old(self, users, make_user):
        user = make_user()
        with pytest.raises(ValidationError, match="Invalid old password"):
            users.change_password(user.id, {"old_password": "nope", "new_password": "new-password-1"})

    def test_update_account_returns_updated_user(self, users, make_user):
        user = make_user()
        updated = users.update_account(user.id, {"fullname": "New Name", "email": "NEW@example.com"})
        assert updated["fullname"] == "New Name"
        assert updated["email"] == "new@example.com"

    def test_update_account_email_must_be_unique(self, users, make_user):
        make_user("first")
        second = make_user("second")
        with pytest.raises(ValidationError):
            users.update_account(second.id, {"email": "first@example.com"})

    def test_update_account_email_race(self, users, make_user, monkeypatch):
        make_user("first")
        second = make_user("second")
        monkeypatch.setattr(users, "_email_taken", lambda email, user_id: False)
        with pytest.raises(ValidationError, match="already in use"):
            users.update_account(second.id, {"email": "first@example.com"})

    def test_update_account_needs_a_field(self, users, make_user):
        with pytest.raises(ValidationError):
            users.update_account(make_user().id, {})

    def test_update_avatar_over_http_replaces_old_file(self, client, make_user, auth_headers, media):
        user = make_user()
        headers = auth_headers(user)

        first = client.patch(
            f"{BASE}/avatar",
            data={"avatar": (io.BytesIO(b"one"), "one.png")},
            headers=headers,
            content_type="multipart/form-data",
        ).get_json()["data"]["avatar_url"]
        second = client.patch(
            f"{BASE}/avatar",
            data={"avatar": (io.BytesIO(b"two"), "two.jpg")},
            headers=headers,
            content_type="multipart/form-data",
        )
        assert second.status_code == 200
        assert not os.path.exists(os.path.join(media.root, first.rsplit("/", 1)[1]))

    def test_avatar_rejects_wrong_extension(self, client, make_user, auth_headers):
        resp = client.patch(
            f"{BASE}/avatar",
            data={"avatar": (io.BytesIO(b"x"), "evil.exe")},
            headers=auth_headers(make_user()),
            content_type="multipart/form-data",
        )
        assert resp.status_code == 400

    def test_avatar_missing_file(self, client, make_user, auth_headers):
        resp = client.patch(f"{BASE}/avatar", headers=auth_headers(make_user()))
        assert resp.status_code == 400


# =============================================================================
# Channel views
# =============================================================================


class TestChannel:
    def test_channel_profile_counts(self, client, make_user, auth_headers):
        channel = make_user("channel")
        fan = make_user("fan")
        client.post(f"/api/v1/subscriptions/c/{channel.id}", headers=auth_headers(fan))

        resp = client.get(f"{BASE}/c/channel", headers=auth_headers(fan))
        data = resp.get_json()["data"]
        assert data["subscribers_count"] == 1
        assert data["channels_subscribed_to_count"] == 0
        assert data["is_subscribed"] is True

        anonymous = client.get(f"{BASE}/c/channel").get_json()["data"]
        assert anonymous["is_subscribed"] is False

    def test_unknown_channel(self, users):
        with pytest.raises(NotFoundError):
            users.channel_profile("ghost")

    def test_watch_history(self, client, make_user, make_video, auth_headers):
        owner = make_user()
        viewer = make_user()
        first, second = make_video(owner), make_video(owner)
        headers = auth_headers(viewer)
        for video in (first, second, first):
            client.get(f"/api/v1/videos/{video.id}", headers=headers)

        history = client.get(f"{BASE}/history", headers=headers).get_json()["data"]
        assert sorted(v["id"] for v in history) == sorted([first.id, second.id])
