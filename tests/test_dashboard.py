from datetime import timedelta

import pytest

from models.base_model import utcnow
from models.like import LikeTarget
from models.subscription import Subscription
from services.base import PageRequest
from services.dashboard import DashboardService
from utils.exceptions import ValidationError


@pytest.fixture
def dashboard(session):
    return DashboardService(session)


@pytest.fixture
def channel(session, make_user, make_video, make_comment, make_playlist, like):
    """A channel with two published videos, one draft and some engagement."""
    owner = make_user("creator")
    fan = make_user("fan")
    popular = make_video(owner, title="Popular", views=100, duration=120.0)
    quiet = make_video(owner, title="Quiet", views=5, duration=30.0)
    draft = make_video(owner, title="Draft", published=False, views=0, duration=10.0)
    old = make_video(owner, title="Old", views=7, duration=20.0, created_at=utcnow() - timedelta(days=90))

    like(fan, LikeTarget.video(popular.id))
    like(owner, LikeTarget.video(popular.id))
    like(fan, LikeTarget.video(quiet.id))
    make_comment(fan, popular)
    make_comment(fan, popular)
    make_comment(owner, draft)
    make_playlist(owner)

    session.add(Subscription(subscriber_id=fan.id, channel_id=owner.id))
    session.add(Subscription(subscriber_id=owner.id, channel_id=fan.id))
    session.commit()

    return {"owner": owner, "fan": fan, "popular": popular, "quiet": quiet, "draft": draft, "old": old}


class TestChannelStats:
    def test_overview(self, dashboard, channel):
        overview = dashboard.channel_stats(channel["owner"].id)["overview"]
        assert overview == {
            "total_videos": 4,
            "published_videos": 3,
            "draft_videos": 1,
            "total_views": 112,
            "total_likes": 3,
            "total_comments": 3,
            "total_duration": pytest.approx(180.0),
            "subscriber_count": 1,
            "subscription_count": 1,
            "playlist_count": 1,
        }

    def test_recent_activity_and_top_video(self, dashboard, channel):
        stats = dashboard.channel_stats(channel["owner"].id)
        assert stats["recent_activity"] == {"videos_last_30_days": 3, "views_last_30_days": 105}
        top = stats["top_performing"]["top_video"]
        assert top["id"] == channel["popular"].id
        assert top["views"] == 100

    def test_empty_channel(self, dashboard, make_user):
        stats = dashboard.channel_stats(make_user().id)
        assert stats["overview"]["total_videos"] == 0
        assert stats["overview"]["total_views"] == 0
        assert stats["top_performing"]["top_video"] is None

    def test_over_http_requires_auth(self, client):
        assert client.get("/api/v1/dashboard/stats").status_code == 401


class TestChannelVideos:
    def test_engagement_counts(self, dashboard, channel):
        page = dashboard.channel_videos(channel["owner"].id, PageRequest(sort_by="views", descending=True))
        by_title = {item["title"]: item for item in page["items"]}

        assert page["total"] == 4
        assert by_title["Popular"]["likes_count"] == 2
        assert by_title["Popular"]["comments_count"] == 2
        assert by_title["Popular"]["engagement"] == 4
        assert by_title["Quiet"]["engagement"] == 1
        assert by_title["Old"]["engagement"] == 0
        assert "owner" not in by_title["Popular"]
        assert page["items"][0]["title"] == "Popular"

    def test_status_filter(self, dashboard, channel):
        owner_id = channel["owner"].id
        drafts = dashboard.channel_videos(owner_id, status="draft")
        assert [v["title"] for v in drafts["items"]] == ["Draft"]
        assert drafts["items"][0]["comments_count"] == 1

        assert dashboard.channel_videos(owner_id, status="published")["total"] == 3

    def test_unknown_status(self, dashboard, make_user):
        with pytest.raises(ValidationError):
            dashboard.channel_videos(make_user().id, status="archived")

    def test_other_channels_are_not_counted(self, dashboard, channel):
        page = dashboard.channel_videos(channel["fan"].id)
        assert page["total"] == 0
        assert page["items"] == []

    def test_over_http(self, client, auth_headers, channel):
        resp = client.get(
            "/api/v1/dashboard/videos?status=published&sort=-views",
            headers=auth_headers(channel["owner"]),
        )
        assert resp.status_code == 200
        titles = [v["title"] for v in resp.get_json()["data"]["items"]]
        assert titles == ["Popular", "Old", "Quiet"]
