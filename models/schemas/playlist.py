from marshmallow import Schema, fields, validate

from models.playlist import PlaylistPrivacy
from models.schemas.common import BaseSchema, OwnerSchema


class PlaylistCreateSchema(BaseSchema):
    title = fields.String(required=True, validate=validate.Length(min=1, max=255))
    description = fields.String(load_default="")
    privacy = fields.Enum(PlaylistPrivacy, by_value=True, load_default=PlaylistPrivacy.PUBLIC)


class PlaylistUpdateSchema(BaseSchema):
    title = fields.String(validate=validate.Length(min=1, max=255))
    description = fields.String()
    privacy = fields.Enum(PlaylistPrivacy, by_value=True)


class PlaylistOutSchema(Schema):
    id = fields.String()
    title = fields.String()
    description = fields.String()
    privacy = fields.Enum(PlaylistPrivacy, by_value=True)
    views = fields.Integer()
    owner = fields.Nested(OwnerSchema)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
