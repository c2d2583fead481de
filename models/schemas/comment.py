from marshmallow import Schema, fields, validate

from models.schemas.common import BaseSchema, OwnerSchema


class CommentCreateSchema(BaseSchema):
    content = fields.String(required=True, validate=validate.Length(min=1, max=5000))


# same shape, content is the only editable field
CommentUpdateSchema = CommentCreateSchema


class CommentOutSchema(Schema):
    id = fields.String()
    content = fields.String()
    video_id = fields.String()
    owner = fields.Nested(OwnerSchema)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
