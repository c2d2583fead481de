import uuid

import pytest

from models.subscription import Subscription
from services.subscriptions import SubscriptionService
from utils.exceptions import NotFoundError, ValidationError


@pytest.fixture
def subscriptions(session):
    return SubscriptionService(session)


class TestToggle:
    def test_self_subscription_is_rejected(self, subscriptions, session, make_user):
        user = make_user()
        with pytest.raises(ValidationError):
            subscriptions.toggle(user.id, user.id)
        assert session.query(Subscription).count() == 0

    def test_self_subscription_checked_before_lookup(self, subscriptions):
        # the id does not exist, still a validation error rather than 404
        ghost = str(uuid.uuid4())
        with pytest.raises(ValidationError):
            subscriptions.toggle(ghost, ghost)

    def test_toggle_on_and_off(self, subscriptions, session, make_user):
        fan, channel = make_user(), make_user()
        assert subscriptions.toggle(fan.id, channel.id) == {"subscribed": True}
        assert session.query(Subscription).count() == 1
        assert subscriptions.toggle(fan.id, channel.id) == {"subscribed": False}
        assert session.query(Subscription).count() == 0

    def test_unknown_channel(self, subscriptions, make_user):
        with pytest.raises(NotFoundError):
            subscriptions.toggle(make_user().id, str(uuid.uuid4()))

    def test_malformed_channel_id(self, subscriptions, make_user):
        with pytest.raises(ValidationError, match="Invalid channel ID"):
            subscriptions.toggle(make_user().id, "abc")


class TestListings:
    def test_subscribers_and_subscribed_channels(self, subscriptions, make_user):
        channel = make_user("chan")
        fans = [make_user(), make_user()]
        for fan in fans:
            subscriptions.toggle(fan.id, channel.id)

        subscribers = subscriptions.subscribers(channel.id)
        assert subscribers["total"] == 2
        assert {s["subscriber"]["id"] for s in subscribers["items"]} == {f.id for f in fans}

        followed = subscriptions.subscribed_channels(fans[0].id)
        assert [s["channel"]["username"] for s in followed["items"]] == ["chan"]

    def test_http_self_subscription(self, client, make_user, auth_headers):
        user = make_user()
        resp = client.post(f"/api/v1/subscriptions/c/{user.id}", headers=auth_headers(user))
        assert resp.status_code == 400
