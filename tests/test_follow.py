from conftest import register


def test_follow_and_unfollow(client, alice, bob):
    response = client.post(f"/api/users/{bob.id}/follow", headers=alice.headers)
    assert response.status_code == 201
    assert response.json() == {"success": True, "message": "User followed successfully"}

    alice_view = client.get(f"/api/users/{alice.id}").json()["data"]["user"]
    bob_view = client.get(f"/api/users/{bob.id}").json()["data"]["user"]
    assert [user["id"] for user in alice_view["following"]] == [bob.id]
    assert [user["id"] for user in bob_view["followers"]] == [alice.id]

    response = client.delete(f"/api/users/{bob.id}/follow", headers=alice.headers)
    assert response.status_code == 200
    assert response.json()["message"] == "User unfollowed successfully"
    bob_view = client.get(f"/api/users/{bob.id}").json()["data"]["user"]
    assert bob_view["followers"] == []


def test_cannot_follow_self(client, alice):
    response = client.post(f"/api/users/{alice.id}/follow", headers=alice.headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Cannot follow yourself"


def test_cannot_follow_twice(client, alice, bob):
    client.post(f"/api/users/{bob.id}/follow", headers=alice.headers)
    response = client.post(f"/api/users/{bob.id}/follow", headers=alice.headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Already following this user"
    followers = client.get(f"/api/users/{bob.id}/followers").json()["data"]
    assert followers["pagination"]["total"] == 1


def test_follow_unknown_user(client, alice):
    response = client.post("/api/users/999/follow", headers=alice.headers)
    assert response.status_code == 404


def test_unfollow_when_not_following(client, alice, bob):
    response = client.delete(f"/api/users/{bob.id}/follow", headers=alice.headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Not following this user"


def test_follow_requires_auth(client, bob):
    assert client.post(f"/api/users/{bob.id}/follow").status_code == 401


def test_follower_and_following_lists_agree(client, alice, bob):
    carol = register(client, "carol")
    client.post(f"/api/users/{alice.id}/follow", headers=bob.headers)
    client.post(f"/api/users/{alice.id}/follow", headers=carol.headers)
    client.post(f"/api/users/{carol.id}/follow", headers=alice.headers)

    followers = client.get(f"/api/users/{alice.id}/followers").json()["data"]
    assert sorted(user["id"] for user in followers["followers"]) == sorted([bob.id, carol.id])
    assert followers["pagination"]["total"] == 2

    following = client.get(f"/api/users/{alice.id}/following").json()["data"]
    assert [user["id"] for user in following["following"]] == [carol.id]
    assert following["pagination"]["total"] == 1

    # every follower listed by alice lists alice as followed
    for follower in followers["followers"]:
        assert alice.id in follower["following"]


def test_follower_list_is_paginated(client, alice):
    for index in range(3):
        fan = register(client, f"fan{index}")
        client.post(f"/api/users/{alice.id}/follow", headers=fan.headers)
    page = client.get(f"/api/users/{alice.id}/followers?page=2&limit=2").json()["data"]
    assert len(page["followers"]) == 1
    assert page["pagination"] == {"page": 2, "limit": 2, "total": 3, "pages": 2}


def test_followers_of_unknown_user(client):
    assert client.get("/api/users/999/followers").status_code == 404
