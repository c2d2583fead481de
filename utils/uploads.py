"""
Staging of multipart uploads.

Files are written to a temp directory under a random, sanitized name and
then handed to the media storage, which owns them from that point on.
"""
from __future__ import annotations

import os
import uuid
from typing import Optional

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from utils.exceptions import ValidationError

ALLOWED_EXTENSIONS = {
    "video": {".mp4", ".mov", ".mkv", ".avi", ".webm", ".m4v"},
    "image": {".jpg", ".jpeg", ".png", ".gif", ".webp"},
}


def save_upload(file: Optional[FileStorage], temp_dir: str, kind: str) -> str:
    """Write `file` under `temp_dir` and return the staged path."""
    if file is None or not file.filename:
        raise ValidationError(f"{kind.capitalize()} file is required")

    filename = secure_filename(file.filename)
    ext = os.path.splitext(filename)[1].lower()
    if ext not in ALLOWED_EXTENSIONS[kind]:
        allowed = ", ".join(sorted(ALLOWED_EXTENSIONS[kind]))
        raise ValidationError(f"Unsupported {kind} file type. Allowed: {allowed}")

    os.makedirs(temp_dir, exist_ok=True)
    path = os.path.join(temp_dir, f"{uuid.uuid4().hex}{ext}")
    file.save(path)
    return path


def discard(path: Optional[str]) -> None:
    """Remove a staged file that never reached the media storage."""
    if path and os.path.exists(path):
        os.remove(path)
