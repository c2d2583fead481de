from __future__ import annotations

from flask import request

from services.base import DEFAULT_LIMIT, DEFAULT_PAGE, PageRequest
from utils.exceptions import ValidationError


def parse_page_request(default_sort: str | None = None) -> PageRequest:
    """
    Read ?page=, ?limit= and ?sort= from the query string.
    `sort` is a field name, prefixed with '-' for descending order.
    """
    try:
        page = int(request.args.get("page", DEFAULT_PAGE))
        limit = int(request.args.get("limit", DEFAULT_LIMIT))
    except ValueError:
        raise ValidationError("page and limit must be integers")

    sort = (request.args.get("sort") or default_sort or "").strip()
    sort_by, descending = None, True
    if sort:
        descending = sort.startswith("-")
        sort_by = sort.lstrip("-+") or None

    return PageRequest(page=page, limit=limit, sort_by=sort_by, descending=descending).clamped()
