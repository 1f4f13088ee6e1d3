from conftest import create_post, register


def test_feed_contains_own_and_followed_posts(client, alice, bob):
    carol = register(client, "carol")
    create_post(client, alice, "alice post")
    create_post(client, bob, "bob post")
    create_post(client, carol, "carol post")
    client.post(f"/api/users/{bob.id}/follow", headers=alice.headers)

    data = client.get("/api/feed/", headers=alice.headers).json()["data"]
    assert [post["text"] for post in data["posts"]] == ["bob post", "alice post"]
    assert data["pagination"]["total"] == 2


def test_feed_after_unfollow(client, alice, bob):
    create_post(client, bob, "bob post")
    client.post(f"/api/users/{bob.id}/follow", headers=alice.headers)
    client.delete(f"/api/users/{bob.id}/follow", headers=alice.headers)
    data = client.get("/api/feed/", headers=alice.headers).json()["data"]
    assert data["posts"] == []


def test_feed_requires_auth(client):
    assert client.get("/api/feed/").status_code == 401


def test_explore_ranks_posts_by_engagement(client, alice, bob):
    quiet = create_post(client, alice, "quiet")
    popular = create_post(client, alice, "popular")
    newest = create_post(client, bob, "newest")
    client.post(f"/api/posts/{popular['id']}/like", headers=bob.headers)
    client.post(f"/api/posts/{popular['id']}/comments", json={"text": "wow"}, headers=bob.headers)
    client.post(f"/api/posts/{quiet['id']}/like", headers=bob.headers)

    data = client.get("/api/explore/").json()["data"]
    assert [post["id"] for post in data["posts"]] == [popular["id"], quiet["id"], newest["id"]]
    assert data["pagination"]["total"] == 3


def test_explore_users_ranks_by_followers(client, alice, bob):
    carol = register(client, "carol")
    client.post(f"/api/users/{bob.id}/follow", headers=alice.headers)
    client.post(f"/api/users/{bob.id}/follow", headers=carol.headers)
    client.post(f"/api/users/{alice.id}/follow", headers=bob.headers)

    users = client.get("/api/explore/users").json()["data"]["users"]
    assert [user["username"] for user in users] == ["bob", "alice", "carol"]
    assert [user["followersCount"] for user in users] == [2, 1, 0]


def test_explore_is_public(client, alice):
    create_post(client, alice)
    assert client.get("/api/explore/").status_code == 200
    assert client.get("/api/explore/users").status_code == 200


def test_feed_is_empty_without_posts_or_follows(client, alice):
    data = client.get("/api/feed/", headers=alice.headers).json()["data"]
    assert data["posts"] == []
    assert data["pagination"] == {"page": 1, "limit": 10, "total": 0, "pages": 0}
