from __future__ import annotations

from typing import Any, List, Optional

from flask import jsonify


def api_response(data: Any = None, message: str = "Success", status: int = 200):
    """Success envelope shared by every endpoint."""
    payload = {
        "success": status < 400,
        "statusCode": status,
        "data": data,
        "message": message,
        "errors": [],
    }
    return jsonify(payload), status


def error_response(message: str, status: int, errors: Optional[List[str]] = None):
    payload = {
        "success": False,
        "statusCode": status,
        "data": None,
        "message": message,
        "errors": list(errors or []),
    }
    return jsonify(payload), status
