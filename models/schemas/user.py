from marshmallow import Schema, fields, pre_load, validate, validates, validates_schema, ValidationError

from models.schemas.common import BaseSchema

USERNAME_PATTERN = r"^[a-z0-9_.-]+$"


def _norm(v):
    return v.strip().lower() if isinstance(v, str) else v


def _normalize_identity_fields(data):
    if not isinstance(data, dict):
        return data
    data = dict(data)
    for key in ("email", "username"):
        if key in data:
            data[key] = _norm(data[key])
    return data


class UserCreateSchema(BaseSchema):
    fullname = fields.String(required=True, validate=validate.Length(min=1, max=128))
    email = fields.Email(required=True)
    username = fields.String(
        required=True,
        validate=[
            validate.Length(min=3, max=64),
            validate.Regexp(USERNAME_PATTERN, error="Username may only contain letters, digits, '_', '.' and '-'."),
        ],
    )
    password = fields.String(required=True, load_only=True)

    @pre_load
    def normalize(self, data, **kwargs):
        return _normalize_identity_fields(data)

    @validates("password")
    def validate_password(self, value, **kwargs):
        if len(value) < 8:
            raise ValidationError("Password must be at least 8 characters long.")


class UserLoginSchema(BaseSchema):
    username = fields.String()
    email = fields.String()
    password = fields.String(required=True, load_only=True)

    @pre_load
    def normalize(self, data, **kwargs):
        return _normalize_identity_fields(data)

    @validates_schema
    def require_identifier(self, data, **kwargs):
        if not data.get("username") and not data.get("email"):
            raise ValidationError("username or email is required", field_name="username")


class ChangePasswordSchema(BaseSchema):
    old_password = fields.String(required=True, load_only=True)
    new_password = fields.String(required=True, load_only=True)

    @validates("new_password")
    def validate_password(self, value, **kwargs):
        if len(value) < 8:
            raise ValidationError("Password must be at least 8 characters long.")


class UserUpdateSchema(BaseSchema):
    fullname = fields.String(validate=validate.Length(min=1, max=128))
    email = fields.Email()

    @pre_load
    def normalize(self, data, **kwargs):
        return _normalize_identity_fields(data)

    @validates_schema
    def require_something(self, data, **kwargs):
        if not data:
            raise ValidationError("Provide fullname and/or email to update")


class UserOutSchema(Schema):
    id = fields.String()
    username = fields.String()
    email = fields.String()
    fullname = fields.String()
    avatar_url = fields.String(allow_none=True)
    cover_image_url = fields.String(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
