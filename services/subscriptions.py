from __future__ import annotations

from typing import Any, Dict

from models.schemas.subscription import SubscribedChannelOutSchema, SubscriberOutSchema
from models.subscription import Subscription
from models.user import User
from services.base import PageRequest, ResourceService, parse_id
from utils.exceptions import ValidationError

subscriber_out_schema = SubscriberOutSchema()
channel_out_schema = SubscribedChannelOutSchema()


class SubscriptionService(ResourceService):
    sort_columns = {"created_at": Subscription.created_at}

    def toggle(self, actor_id, channel_id) -> Dict[str, bool]:
        channel_id = parse_id(channel_id, "channel")
        if channel_id == str(actor_id):
            raise ValidationError("You cannot subscribe to your own channel")
        channel = self._get(User, channel_id, "channel")
        subscribed = self._toggle(Subscription, subscriber_id=str(actor_id), channel_id=channel.id)
        return {"subscribed": subscribed}

    def subscribers(self, channel_id, request: PageRequest = PageRequest()) -> Dict[str, Any]:
        channel = self._get(User, channel_id, "channel")
        query = self.session.query(Subscription).filter(Subscription.channel_id == channel.id)
        return self._paginate(query, request, subscriber_out_schema.dump)

    def subscribed_channels(self, subscriber_id, request: PageRequest = PageRequest()) -> Dict[str, Any]:
        subscriber = self._get(User, subscriber_id, "subscriber")
        query = self.session.query(Subscription).filter(Subscription.subscriber_id == subscriber.id)
        return self._paginate(query, request, channel_out_schema.dump)
