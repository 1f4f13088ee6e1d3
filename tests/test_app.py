import pytest

from social_network_api.app.schemas.common import Pagination

from conftest import create_post


def test_root_and_health(client):
    assert client.get("/").json()["success"] is True
    assert client.get("/api/health").json() == {"success": True, "message": "API is running"}


def test_unknown_route_uses_envelope(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert response.json()["success"] is False


def test_cors_allows_frontend_origin(client, settings):
    response = client.options(
        "/api/posts/",
        headers={"Origin": settings.frontend_url, "Access-Control-Request-Method": "GET"},
    )
    assert response.headers["access-control-allow-origin"] == settings.frontend_url


def test_pagination_metadata():
    assert Pagination.build(1, 10, 0).model_dump() == {"page": 1, "limit": 10, "total": 0, "pages": 0}
    assert Pagination.build(2, 10, 21).pages == 3


def test_pages_partition_results(client, alice):
    for index in range(5):
        create_post(client, alice, f"post {index}")
    seen = []
    for page in (1, 2, 3):
        data = client.get(f"/api/posts/?page={page}&limit=2").json()["data"]
        assert data["pagination"]["pages"] == 3
        seen.extend(post["text"] for post in data["posts"])
    assert seen == [f"post {index}" for index in reversed(range(5))]


def test_page_beyond_end_is_empty(client, alice):
    create_post(client, alice)
    data = client.get("/api/posts/?page=5").json()["data"]
    assert data["posts"] == []
    assert data["pagination"]["total"] == 1


def test_invalid_paging_parameters(client):
    assert client.get("/api/posts/?page=0").status_code == 400
    assert client.get("/api/posts/?limit=101").status_code == 400


@pytest.mark.parametrize(
    "path", ["/api/posts", "/api/users", "/api/explore", "/api/search?q=a", "/api/feed"]
)
def test_collections_answer_without_trailing_slash(client, alice, path):
    create_post(client, alice, "a post")
    response = client.get(path, headers=alice.headers, follow_redirects=False)
    assert response.status_code == 200
    assert response.json()["success"] is True


def test_create_post_without_trailing_slash(client, alice):
    response = client.post(
        "/api/posts", data={"text": "hi"}, headers=alice.headers, follow_redirects=False
    )
    assert response.status_code == 201
    assert response.json()["data"]["post"]["text"] == "hi"
