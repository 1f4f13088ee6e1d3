"""
External image storage for post attachments.

Images arrive as multipart parts, are checked here (count, type, size)
and then pushed to Cloudinary through its signed REST upload endpoint.
Only the resulting ``secure_url`` values are persisted.

``CloudinaryStorage.upload`` is blocking (``requests``); the post
service runs it in the threadpool.  Missing credentials raise
``StorageNotConfigured`` so callers can degrade to "no images"; every
other failure raises ``UpstreamFailure``.
"""

import hashlib
import logging
import os
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import requests

from ..core.config import Settings
from ..core.errors import StorageNotConfigured, UpstreamFailure, ValidationFailed


logger = logging.getLogger(__name__)

MAX_IMAGES_PER_POST = 5
MAX_IMAGE_BYTES = 5 * 1024 * 1024
ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif", ".webp"}
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}

# Limit to 1200x1200, automatic quality and format.
UPLOAD_TRANSFORMATION = "c_limit,h_1200,w_1200/q_auto/f_auto"


@dataclass
class ImageUpload:
    """An image file received from the client, fully read into memory."""

    filename: str
    content_type: str
    data: bytes


def validate_images(images: Sequence[ImageUpload]) -> None:
    """Reject uploads that are too many, too large or not images."""
    if len(images) > MAX_IMAGES_PER_POST:
        raise ValidationFailed.for_field(
            "images", f"At most {MAX_IMAGES_PER_POST} images are allowed per post"
        )
    for image in images:
        extension = os.path.splitext(image.filename or "")[1].lower()
        if extension not in ALLOWED_EXTENSIONS or image.content_type not in ALLOWED_CONTENT_TYPES:
            raise ValidationFailed.for_field(
                "images", "Only image files are allowed (jpeg, jpg, png, gif, webp)"
            )
        if len(image.data) > MAX_IMAGE_BYTES:
            raise ValidationFailed.for_field("images", f"{image.filename} exceeds the 5MB limit")


class ImageStorage(ABC):
    """Interface for image backends."""

    @abstractmethod
    def upload(self, images: Sequence[ImageUpload], folder: str) -> List[str]:
        """Store ``images`` under ``folder`` and return their public URLs."""


class CloudinaryStorage(ImageStorage):
    """Signed uploads to the Cloudinary REST API."""

    api_base = "https://api.cloudinary.com/v1_1"

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None) -> None:
        self.settings = settings
        self.session = session or requests.Session()

    def _signature(self, params: Dict[str, str]) -> str:
        to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
        return hashlib.sha1((to_sign + self.settings.cloudinary_api_secret).encode("utf-8")).hexdigest()

    def _upload_one(self, image: ImageUpload, folder: str) -> str:
        params = {
            "folder": folder,
            "timestamp": str(int(time.time())),
            "transformation": UPLOAD_TRANSFORMATION,
        }
        data = dict(params)
        data["api_key"] = self.settings.cloudinary_api_key
        data["signature"] = self._signature(params)
        url = f"{self.api_base}/{self.settings.cloudinary_cloud_name}/image/upload"
        try:
            response = self.session.post(
                url,
                data=data,
                files={"file": (image.filename, image.data, image.content_type)},
                timeout=self.settings.upload_timeout,
            )
            response.raise_for_status()
            return response.json()["secure_url"]
        except requests.HTTPError as exc:
            message = ""
            if exc.response is not None:
                try:
                    message = exc.response.json().get("error", {}).get("message", "")
                except ValueError:
                    message = exc.response.text
            logger.error("Cloudinary rejected %s: %s", image.filename, message or exc)
            raise UpstreamFailure(f"Failed to upload images: {message or exc}") from exc
        except (requests.RequestException, KeyError, ValueError) as exc:
            logger.error("Cloudinary upload of %s failed: %s", image.filename, exc)
            raise UpstreamFailure(f"Failed to upload images: {exc}") from exc

    def upload(self, images: Sequence[ImageUpload], folder: str) -> List[str]:
        if not self.settings.cloudinary_configured:
            raise StorageNotConfigured(
                "Cloudinary is not configured. Please set CLOUDINARY_CLOUD_NAME, "
                "CLOUDINARY_API_KEY, and CLOUDINARY_API_SECRET environment variables."
            )
        return [self._upload_one(image, folder) for image in images]
