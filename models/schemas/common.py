from __future__ import annotations

from typing import Any, List

from marshmallow import EXCLUDE, Schema, fields, pre_load


def flatten_messages(messages: Any, prefix: str = "") -> List[str]:
    """Turn marshmallow's nested error dict into flat "field: message" strings."""
    if isinstance(messages, dict):
        out: List[str] = []
        for key, value in messages.items():
            name = f"{prefix}.{key}" if prefix else str(key)
            out.extend(flatten_messages(value, name))
        return out
    if isinstance(messages, (list, tuple)):
        out = []
        for item in messages:
            out.extend(flatten_messages(item, prefix))
        return out
    return [f"{prefix}: {messages}" if prefix else str(messages)]


class BaseSchema(Schema):
    """
    Input schemas ignore unknown keys (clients also send tokens in the body)
    and trim surrounding whitespace from every string except secrets.
    """

    strip_exempt = ("password", "old_password", "new_password")

    class Meta:
        unknown = EXCLUDE

    @pre_load
    def _strip_strings(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        return {
            k: (v.strip() if isinstance(v, str) and k not in self.strip_exempt else v)
            for k, v in data.items()
        }


class OwnerSchema(Schema):
    """Minimal public profile joined onto every owned resource."""
    id = fields.String()
    username = fields.String()
    fullname = fields.String()
    avatar_url = fields.String(allow_none=True)
