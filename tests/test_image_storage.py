import hashlib

import pytest
import requests

from social_network_api.app.core.config import Settings
from social_network_api.app.core.errors import StorageNotConfigured, UpstreamFailure, ValidationFailed
from social_network_api.app.services.image_storage import (
    CloudinaryStorage,
    ImageStorage,
    ImageUpload,
    validate_images,
)


IMAGE = ImageUpload(filename="cat.png", content_type="image/png", data=b"png-bytes")


class FakeResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self._payload = payload
        self.text = str(payload)

    def json(self):
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


class FakeSession:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        return self.response


def configured_settings() -> Settings:
    return Settings(
        cloudinary_cloud_name="demo",
        cloudinary_api_key="key",
        cloudinary_api_secret="secret",
        cloudinary_folder="social-posts",
    )


def test_unconfigured_storage_refuses_upload():
    storage = CloudinaryStorage(Settings(cloudinary_cloud_name="", cloudinary_api_key="", cloudinary_api_secret=""))
    with pytest.raises(StorageNotConfigured):
        storage.upload([IMAGE], "social-posts")


def test_signed_upload_returns_secure_urls():
    session = FakeSession(FakeResponse(200, {"secure_url": "https://res.cloudinary.com/demo/cat.png"}))
    storage = CloudinaryStorage(configured_settings(), session=session)

    urls = storage.upload([IMAGE], "social-posts")

    assert urls == ["https://res.cloudinary.com/demo/cat.png"]
    url, kwargs = session.calls[0]
    assert url == "https://api.cloudinary.com/v1_1/demo/image/upload"
    data = kwargs["data"]
    assert data["api_key"] == "key"
    assert data["folder"] == "social-posts"
    to_sign = "&".join(f"{key}={data[key]}" for key in ("folder", "timestamp", "transformation"))
    assert data["signature"] == hashlib.sha1((to_sign + "secret").encode("utf-8")).hexdigest()
    assert kwargs["files"]["file"] == ("cat.png", b"png-bytes", "image/png")


def test_rejected_upload_raises_upstream_failure():
    session = FakeSession(FakeResponse(400, {"error": {"message": "Invalid image file"}}))
    storage = CloudinaryStorage(configured_settings(), session=session)
    with pytest.raises(UpstreamFailure) as excinfo:
        storage.upload([IMAGE], "social-posts")
    assert "Invalid image file" in excinfo.value.message
    assert not isinstance(excinfo.value, StorageNotConfigured)


def test_transport_error_raises_upstream_failure():
    class BrokenSession:
        def post(self, url, **kwargs):
            raise requests.ConnectionError("offline")

    storage = CloudinaryStorage(configured_settings(), session=BrokenSession())
    with pytest.raises(UpstreamFailure):
        storage.upload([IMAGE], "social-posts")


def test_validate_images_limits():
    validate_images([IMAGE] * 5)
    with pytest.raises(ValidationFailed):
        validate_images([IMAGE] * 6)
    with pytest.raises(ValidationFailed):
        validate_images([ImageUpload("cat.png", "text/plain", b"x")])
    with pytest.raises(ValidationFailed):
        validate_images([ImageUpload("cat.exe", "image/png", b"x")])
    with pytest.raises(ValidationFailed):
        validate_images([ImageUpload("big.jpg", "image/jpeg", b"0" * (5 * 1024 * 1024 + 1))])


def test_image_storage_is_abstract():
    with pytest.raises(TypeError):
        ImageStorage()

    class Incomplete(ImageStorage):
        pass

    with pytest.raises(TypeError):
        Incomplete()
