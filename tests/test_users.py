from conftest import create_post, register


EXPERIENCE = {
    "title": "Senior Software Engineer",
    "company": "Tech Corp",
    "location": "San Francisco, CA",
    "startDate": "2020-01-01",
    "current": True,
}
EDUCATION = {
    "school": "Stanford University",
    "degree": "Bachelor of Science",
    "fieldOfStudy": "Computer Science",
    "startDate": "2014-09-01",
    "endDate": "2018-06-01",
}


def test_list_users_newest_first(client, alice, bob):
    response = client.get("/api/users/")
    assert response.status_code == 200
    data = response.json()["data"]
    assert [user["username"] for user in data["users"]] == ["bob", "alice"]
    assert data["pagination"] == {"page": 1, "limit": 10, "total": 2, "pages": 1}


def test_get_user_expands_follow_lists(client, alice, bob):
    client.post(f"/api/users/{alice.id}/follow", headers=bob.headers)
    user = client.get(f"/api/users/{alice.id}").json()["data"]["user"]
    assert user["followers"] == [
        {"id": bob.id, "username": "bob", "firstName": "Bob", "lastName": "Builder", "profilePicture": ""}
    ]
    assert user["following"] == []


def test_get_unknown_user(client):
    response = client.get("/api/users/404")
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "User not found"}


def test_update_profile_fields(client, alice):
    response = client.put(
        f"/api/users/{alice.id}",
        json={"bio": "Down the rabbit hole", "website": "https://alice.dev", "location": "Wonderland"},
        headers=alice.headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Profile updated successfully"
    user = body["data"]["user"]
    assert user["bio"] == "Down the rabbit hole"
    assert user["website"] == "https://alice.dev"
    assert user["firstName"] == "Alice"


def test_update_profile_rejects_bad_url(client, alice):
    response = client.put(
        f"/api/users/{alice.id}", json={"website": "not a url"}, headers=alice.headers
    )
    assert response.status_code == 400
    assert response.json()["errors"] == [{"field": "website", "message": "Please provide a valid URL"}]


def test_update_profile_rejects_long_bio(client, alice):
    response = client.put(f"/api/users/{alice.id}", json={"bio": "x" * 501}, headers=alice.headers)
    assert response.status_code == 400


def test_cannot_update_someone_else(client, alice, bob):
    response = client.put(f"/api/users/{alice.id}", json={"bio": "hacked"}, headers=bob.headers)
    assert response.status_code == 403
    assert response.json()["message"] == "Not authorized to update this profile"
    assert client.get(f"/api/users/{alice.id}").json()["data"]["user"]["bio"] is None


def test_update_requires_auth(client, alice):
    assert client.put(f"/api/users/{alice.id}", json={"bio": "x"}).status_code == 401


def test_experience_lifecycle(client, alice):
    created = client.post(f"/api/users/{alice.id}/experiences", json=EXPERIENCE, headers=alice.headers)
    assert created.status_code == 201
    experiences = created.json()["data"]["user"]["experiences"]
    assert len(experiences) == 1
    exp = experiences[0]
    assert exp["title"] == "Senior Software Engineer"
    assert exp["startDate"] == "2020-01-01"
    assert exp["current"] is True

    updated = client.put(
        f"/api/users/{alice.id}/experiences/{exp['id']}",
        json={"current": False, "endDate": "2023-05-01"},
        headers=alice.headers,
    )
    assert updated.status_code == 200
    exp_after = updated.json()["data"]["user"]["experiences"][0]
    assert exp_after["id"] == exp["id"]
    assert exp_after["current"] is False
    assert exp_after["endDate"] == "2023-05-01"
    assert exp_after["company"] == "Tech Corp"

    deleted = client.delete(f"/api/users/{alice.id}/experiences/{exp['id']}", headers=alice.headers)
    assert deleted.status_code == 200
    assert deleted.json()["data"]["user"]["experiences"] == []


def test_experience_requires_title_company_and_start(client, alice):
    response = client.post(
        f"/api/users/{alice.id}/experiences", json={"title": "Engineer"}, headers=alice.headers
    )
    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert {"company", "startDate"} <= fields


def test_experience_update_cannot_null_required_field(client, alice):
    created = client.post(f"/api/users/{alice.id}/experiences", json=EXPERIENCE, headers=alice.headers)
    exp_id = created.json()["data"]["user"]["experiences"][0]["id"]
    response = client.put(
        f"/api/users/{alice.id}/experiences/{exp_id}", json={"title": None}, headers=alice.headers
    )
    assert response.status_code == 400


def test_delete_missing_experience_is_not_found(client, alice):
    response = client.delete(f"/api/users/{alice.id}/experiences/12345", headers=alice.headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Experience not found"


def test_experience_of_other_user_is_not_reachable(client, alice, bob):
    created = client.post(f"/api/users/{bob.id}/experiences", json=EXPERIENCE, headers=bob.headers)
    exp_id = created.json()["data"]["user"]["experiences"][0]["id"]
    # alice addresses bob's record through her own profile path
    response = client.delete(f"/api/users/{alice.id}/experiences/{exp_id}", headers=alice.headers)
    assert response.status_code == 404
    forbidden = client.delete(f"/api/users/{bob.id}/experiences/{exp_id}", headers=alice.headers)
    assert forbidden.status_code == 403


def test_education_lifecycle(client, alice):
    created = client.post(f"/api/users/{alice.id}/education", json=EDUCATION, headers=alice.headers)
    assert created.status_code == 201
    assert created.json()["message"] == "Education added successfully"
    edu = created.json()["data"]["user"]["education"][0]
    assert edu["fieldOfStudy"] == "Computer Science"
    assert edu["current"] is False

    updated = client.put(
        f"/api/users/{alice.id}/education/{edu['id']}", json={"degree": "MSc"}, headers=alice.headers
    )
    assert updated.json()["data"]["user"]["education"][0]["degree"] == "MSc"

    deleted = client.delete(f"/api/users/{alice.id}/education/{edu['id']}", headers=alice.headers)
    assert deleted.json()["data"]["user"]["education"] == []
    again = client.delete(f"/api/users/{alice.id}/education/{edu['id']}", headers=alice.headers)
    assert again.status_code == 404
    assert again.json()["message"] == "Education not found"


def test_list_user_posts_only_returns_that_users_posts(client, alice, bob):
    create_post(client, alice, "first")
    create_post(client, bob, "not alice")
    create_post(client, alice, "second")
    data = client.get(f"/api/users/{alice.id}/posts").json()["data"]
    assert [post["text"] for post in data["posts"]] == ["second", "first"]
    assert data["pagination"]["total"] == 2


def test_user_read_never_exposes_password(client):
    carol = register(client, "carol")
    listed = client.get("/api/users/").json()["data"]["users"]
    single = client.get(f"/api/users/{carol.id}").json()["data"]["user"]
    assert all("password" not in user for user in listed)
    assert "password" not in single
