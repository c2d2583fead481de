from marshmallow import Schema, fields, validate

from models.schemas.common import BaseSchema, OwnerSchema
from models.tweet import MAX_TWEET_LENGTH


class TweetCreateSchema(BaseSchema):
    content = fields.String(
        required=True,
        validate=validate.Length(
            min=1,
            max=MAX_TWEET_LENGTH,
            error=f"Tweet content must be between 1 and {MAX_TWEET_LENGTH} characters.",
        ),
    )


TweetUpdateSchema = TweetCreateSchema


class TweetOutSchema(Schema):
    id = fields.String()
    content = fields.String()
    owner = fields.Nested(OwnerSchema)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
