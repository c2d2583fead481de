"""
Media storage backends.

Uploaded files are first staged on local disk (see utils.uploads) and then
handed to a MediaStorage, which takes ownership of the staged file: it is
gone from the temp directory afterwards whether the upload worked or not.

- CloudinaryStorage: production backend (cloudinary SDK)
- LocalMediaStorage: moves files under MEDIA_ROOT, for development and tests
"""
from __future__ import annotations

import logging
import os
import shutil
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from utils.exceptions import DependencyError
from utils.uploads import ALLOWED_EXTENSIONS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredMedia:
    url: str
    public_id: str
    resource_type: str
    duration: float = 0.0


class MediaStorage(ABC):
    @abstractmethod
    def upload(self, local_path: str) -> StoredMedia:
        ...

    @abstractmethod
    def delete(self, public_id: str, resource_type: str = "image") -> None:
        ...

    def discard(self, public_id: Optional[str], resource_type: str = "image") -> None:
        """Best-effort delete: failures are logged, never raised."""
        if not public_id:
            return
        try:
            self.delete(public_id, resource_type)
        except DependencyError as exc:
            logger.warning("Could not delete media %s (%s): %s", public_id, resource_type, exc)


class CloudinaryStorage(MediaStorage):
    def __init__(self, cloud_name: str, api_key: str, api_secret: str, folder: Optional[str] = None):
        if not (cloud_name and api_key and api_secret):
            raise DependencyError("Cloudinary credentials are not configured")
        cloudinary.config(cloud_name=cloud_name, api_key=api_key, api_secret=api_secret, secure=True)
        self.folder = folder

    def upload(self, local_path: str) -> StoredMedia:
        if not local_path or not os.path.exists(local_path):
            raise DependencyError("Nothing to upload")
        options = {"resource_type": "auto"}
        if self.folder:
            options["folder"] = self.folder
        try:
            response = cloudinary.uploader.upload(local_path, **options)
        except (CloudinaryError, OSError) as exc:
            logger.error("Cloudinary upload failed for %s: %s", local_path, exc)
            raise DependencyError("Error while uploading media") from exc
        finally:
            if os.path.exists(local_path):
                os.remove(local_path)

        return StoredMedia(
            url=response.get("secure_url") or response["url"],
            public_id=response["public_id"],
            resource_type=response.get("resource_type", "image"),
            duration=float(response.get("duration") or 0.0),
        )

    def delete(self, public_id: str, resource_type: str = "image") -> None:
        try:
            result = cloudinary.uploader.destroy(public_id, resource_type=resource_type, invalidate=True)
        except (CloudinaryError, OSError) as exc:
            raise DependencyError("Error while deleting media") from exc
        if result.get("result") not in ("ok", "not found"):
            raise DependencyError(f"Unexpected Cloudinary response: {result.get('result')}")


class LocalMediaStorage(MediaStorage):
    """Keeps media on local disk under `root`, addressed as `base_url/<name>`."""

    def __init__(self, root: str, base_url: str = "/media"):
        self.root = root
        self.base_url = base_url.rstrip("/")
        os.makedirs(self.root, exist_ok=True)

    def upload(self, local_path: str) -> StoredMedia:
        if not local_path or not os.path.exists(local_path):
            raise DependencyError("Nothing to upload")
        name = os.path.basename(local_path)
        target = os.path.join(self.root, name)
        try:
            shutil.move(local_path, target)
        except OSError as exc:
            if os.path.exists(local_path):
                os.remove(local_path)
            raise DependencyError("Error while storing media") from exc

        ext = os.path.splitext(name)[1].lower()
        return StoredMedia(
            url=f"{self.base_url}/{name}",
            public_id=name,
            resource_type="video" if ext in ALLOWED_EXTENSIONS["video"] else "image",
            # local files are not probed; duration stays unknown
            duration=0.0,
        )

    def delete(self, public_id: str, resource_type: str = "image") -> None:
        path = os.path.join(self.root, os.path.basename(public_id))
        try:
            if os.path.exists(path):
                os.remove(path)
        except OSError as exc:
            raise DependencyError("Error while deleting media") from exc


def build_media_storage(config: Mapping[str, Any]) -> MediaStorage:
    backend = (config.get("MEDIA_BACKEND") or "local").lower()
    if backend == "cloudinary":
        return CloudinaryStorage(
            cloud_name=config.get("CLOUDINARY_CLOUD_NAME"),
            api_key=config.get("CLOUDINARY_API_KEY"),
            api_secret=config.get("CLOUDINARY_API_SECRET"),
            folder=config.get("CLOUDINARY_FOLDER"),
        )
    if backend == "local":
        return LocalMediaStorage(config["MEDIA_ROOT"], config.get("MEDIA_BASE_URL", "/media"))
    raise ValueError(f"Unknown MEDIA_BACKEND: {backend}")
