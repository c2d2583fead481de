from marshmallow import Schema, fields, validate

from models.schemas.common import BaseSchema, OwnerSchema


class VideoCreateSchema(BaseSchema):
    title = fields.String(required=True, validate=validate.Length(min=1, max=255))
    description = fields.String(required=True, validate=validate.Length(min=1))


class VideoUpdateSchema(BaseSchema):
    # All optional, but validate if present
    title = fields.String(validate=validate.Length(min=1, max=255))
    description = fields.String(validate=validate.Length(min=1))


class VideoOutSchema(Schema):
    id = fields.String()
    title = fields.String()
    description = fields.String()
    video_url = fields.String()
    thumbnail_url = fields.String()
    duration = fields.Float()
    views = fields.Integer()
    is_published = fields.Boolean()
    owner = fields.Nested(OwnerSchema)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
