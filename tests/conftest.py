"""
Shared fixtures: an application bound to a throwaway SQLite file, a
test client and helpers for creating authenticated users.
"""

from typing import Dict, List, Optional, Sequence

import pytest
from fastapi.testclient import TestClient

from social_network_api.app.api.deps import get_image_storage
from social_network_api.app.core.config import Settings
from social_network_api.app.main import create_app
from social_network_api.app.services.image_storage import ImageStorage, ImageUpload


class FakeStorage(ImageStorage):
    """In-memory image store.  Set ``error`` to make uploads fail."""

    def __init__(self) -> None:
        self.uploaded: List[str] = []
        self.error: Optional[Exception] = None

    def upload(self, images: Sequence[ImageUpload], folder: str) -> List[str]:
        if self.error is not None:
            raise self.error
        urls = [f"https://images.test/{folder}/{image.filename}" for image in images]
        self.uploaded.extend(urls)
        return urls


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=str(tmp_path / "test.db"),
        secret_key="test-secret",
        cloudinary_cloud_name="",
        cloudinary_api_key="",
        cloudinary_api_secret="",
    )


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def app(settings, storage):
    application = create_app(settings)
    application.dependency_overrides[get_image_storage] = lambda: storage
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


class Account:
    def __init__(self, user: Dict, token: str) -> None:
        self.user = user
        self.token = token
        self.id = user["id"]
        self.headers = {"Authorization": f"Bearer {token}"}


def register(client: TestClient, username: str, **extra) -> Account:
    payload = {
        "username": username,
        "email": f"{username}@example.com",
        "password": "password123",
    }
    payload.update(extra)
    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 201, response.text
    data = response.json()["data"]
    return Account(data["user"], data["token"])


def create_post(client: TestClient, account: Account, text: str = "hello world") -> Dict:
    response = client.post("/api/posts/", data={"text": text}, headers=account.headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]["post"]


@pytest.fixture
def alice(client) -> Account:
    return register(client, "alice", firstName="Alice", lastName="Liddell")


@pytest.fixture
def bob(client) -> Account:
    return register(client, "bob", firstName="Bob", lastName="Builder")
