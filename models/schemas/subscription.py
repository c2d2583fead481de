from marshmallow import Schema, fields

from models.schemas.common import OwnerSchema


class SubscriberOutSchema(Schema):
    id = fields.String()
    subscriber = fields.Nested(OwnerSchema)
    created_at = fields.DateTime()


class SubscribedChannelOutSchema(Schema):
    id = fields.String()
    channel = fields.Nested(OwnerSchema)
    created_at = fields.DateTime()
