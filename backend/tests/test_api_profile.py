from __future__ import annotations

from typing import Any

from fastapi.testclient import TestClient

from conftest import auth_headers, register


def _profile(client: TestClient, headers: dict[str, str]) -> dict[str, Any]:
    response = client.get("/api/users/profile", headers=headers)
    assert response.status_code == 200
    return response.json()["data"]


def test_fresh_profile_has_defaults(client: TestClient, account: dict[str, Any]) -> None:
    profile = _profile(client, account["headers"])

    assert profile["userId"] == account["user"]["id"]
    assert profile["credits"] == 0
    assert profile["education"] == []
    assert profile["experiences"] == []
    assert profile["skills"] == []
    assert profile["documents"] == []
    assert profile["recentActivities"] == []
    assert profile["preferences"] == {
        "notifications": {"email": True, "push": True},
        "privacy": {"publicProfile": True, "showEmail": False},
        "theme": "auto",
        "language": "fr",
    }


def test_profile_requires_token(client: TestClient) -> None:
    response = client.get("/api/users/profile")
    assert response.status_code == 401


def test_profiles_are_isolated_per_account(client: TestClient, account: dict[str, Any]) -> None:
    other = register(client, email="b@x.com", name="Bob")
    client.patch("/api/users/profile", json={"bio": "Mine"}, headers=account["headers"])

    theirs = _profile(client, auth_headers(other["accessToken"]))

    assert theirs["userId"] == other["user"]["id"]
    assert "bio" not in theirs or theirs["bio"] is None


def test_update_profile_is_partial(client: TestClient, account: dict[str, Any]) -> None:
    headers = account["headers"]

    first = client.patch(
        "/api/users/profile",
        json={"bio": "Hello", "location": {"city": "Dakar"}},
        headers=headers,
    )
    assert first.status_code == 200

    second = client.patch("/api/users/profile", json={"careerPath": "Engineering"}, headers=headers)
    data = second.json()["data"]

    assert data["bio"] == "Hello"
    assert data["location"]["city"] == "Dakar"
    assert data["careerPath"] == "Engineering"


def test_update_profile_ignores_protected_fields(client: TestClient, account: dict[str, Any]) -> None:
    response = client.patch(
        "/api/users/profile",
        json={"bio": "Hi", "credits": 1000, "userId": "someone-else"},
        headers=account["headers"],
    )

    data = response.json()["data"]
    assert data["credits"] == 0
    assert data["userId"] == account["user"]["id"]


def test_update_preferences_replaces_them(client: TestClient, account: dict[str, Any]) -> None:
    response = client.patch(
        "/api/users/profile/preferences",
        json={"preferences": {"theme": "dark", "language": "en"}},
        headers=account["headers"],
    )

    assert response.status_code == 200
    preferences = response.json()["data"]["preferences"]
    assert preferences["theme"] == "dark"
    assert preferences["language"] == "en"
    assert preferences["notifications"] == {"email": True, "push": True}


def test_update_preferences_rejects_unknown_theme(client: TestClient, account: dict[str, Any]) -> None:
    response = client.patch(
        "/api/users/profile/preferences",
        json={"preferences": {"theme": "neon"}},
        headers=account["headers"],
    )
    assert response.status_code == 400


def test_education_lifecycle(client: TestClient, account: dict[str, Any]) -> None:
    headers = account["headers"]

    created = client.post(
        "/api/users/profile/education",
        json={"degree": "BSc", "school": "UCAD", "year": "2020"},
        headers=headers,
    )
    assert created.status_code == 201
    education = created.json()["data"]["education"]
    assert len(education) == 1
    entry = education[0]
    assert entry["id"]
    assert entry["createdAt"]
    assert entry["field"] == ""

    updated = client.patch(
        f"/api/users/profile/education/{entry['id']}",
        json={"year": "2021"},
        headers=headers,
    )
    assert updated.status_code == 200
    [after] = updated.json()["data"]["education"]
    assert after["id"] == entry["id"]
    assert after["year"] == "2021"
    assert after["degree"] == "BSc"
    assert after["createdAt"] == entry["createdAt"]

    deleted = client.delete(f"/api/users/profile/education/{entry['id']}", headers=headers)
    assert deleted.status_code == 200
    assert deleted.json()["data"]["education"] == []


def test_education_requires_fields(client: TestClient, account: dict[str, Any]) -> None:
    response = client.post(
        "/api/users/profile/education",
        json={"degree": "BSc"},
        headers=account["headers"],
    )

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_update_missing_education_is_not_found(client: TestClient, account: dict[str, Any]) -> None:
    client.get("/api/users/profile", headers=account["headers"])

    response = client.patch(
        "/api/users/profile/education/does-not-exist",
        json={"year": "2021"},
        headers=account["headers"],
    )

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Education not found"}


def test_delete_missing_education_is_not_found(client: TestClient, account: dict[str, Any]) -> None:
    client.get("/api/users/profile", headers=account["headers"])

    response = client.delete("/api/users/profile/education/does-not-exist", headers=account["headers"])

    assert response.status_code == 404
    assert response.json()["error"] == "Education not found"


def test_experience_lifecycle(client: TestClient, account: dict[str, Any]) -> None:
    headers = account["headers"]

    created = client.post(
        "/api/users/profile/experiences",
        json={"title": "Dev", "company": "Acme", "period": "2020-2022", "type": "full-time"},
        headers=headers,
    )
    assert created.status_code == 201
    [entry] = created.json()["data"]["experiences"]
    assert entry["type"] == "full-time"

    updated = client.patch(
        f"/api/users/profile/experiences/{entry['id']}",
        json={"company": "Globex"},
        headers=headers,
    )
    assert updated.json()["data"]["experiences"][0]["company"] == "Globex"

    deleted = client.delete(f"/api/users/profile/experiences/{entry['id']}", headers=headers)
    assert deleted.json()["data"]["experiences"] == []

    missing = client.delete(f"/api/users/profile/experiences/{entry['id']}", headers=headers)
    assert missing.status_code == 404
    assert missing.json()["error"] == "Experience not found"


def test_skill_lifecycle(client: TestClient, account: dict[str, Any]) -> None:
    headers = account["headers"]

    created = client.post(
        "/api/users/profile/skills",
        json={"name": "Python", "level": 80, "category": "tech"},
        headers=headers,
    )
    assert created.status_code == 201
    [entry] = created.json()["data"]["skills"]
    assert entry["level"] == 80

    updated = client.patch(
        f"/api/users/profile/skills/{entry['id']}",
        json={"level": 90},
        headers=headers,
    )
    assert updated.json()["data"]["skills"][0]["level"] == 90

    deleted = client.delete(f"/api/users/profile/skills/{entry['id']}", headers=headers)
    assert deleted.json()["data"]["skills"] == []


def test_skill_level_is_bounded(client: TestClient, account: dict[str, Any]) -> None:
    headers = account["headers"]

    too_high = client.post(
        "/api/users/profile/skills",
        json={"name": "Python", "level": 150},
        headers=headers,
    )
    assert too_high.status_code == 400

    created = client.post(
        "/api/users/profile/skills",
        json={"name": "Python", "level": 50},
        headers=headers,
    )
    skill_id = created.json()["data"]["skills"][0]["id"]

    negative = client.patch(
        f"/api/users/profile/skills/{skill_id}",
        json={"level": -1},
        headers=headers,
    )
    assert negative.status_code == 400


def test_entries_are_added_without_a_prior_profile_read(client: TestClient, account: dict[str, Any]) -> None:
    response = client.post(
        "/api/users/profile/skills",
        json={"name": "SQL", "level": 40},
        headers=account["headers"],
    )

    assert response.status_code == 201
    assert [s["name"] for s in response.json()["data"]["skills"]] == ["SQL"]
    assert _profile(client, account["headers"])["skills"][0]["name"] == "SQL"


def test_game_progress_is_saved_and_updated(client: TestClient, account: dict[str, Any]) -> None:
    headers = account["headers"]

    started = client.put(
        "/api/users/profile/games/riasec",
        json={"gameType": "orientation", "currentQuestion": 3, "totalQuestions": 10},
        headers=headers,
    )
    assert started.status_code == 200
    [progress] = started.json()["data"]["gameProgress"]
    assert progress["gameId"] == "riasec"
    assert progress["currentQuestion"] == 3
    assert progress["completed"] is False

    moved = client.put(
        "/api/users/profile/games/riasec",
        json={"currentQuestion": 7},
        headers=headers,
    )
    [progress] = moved.json()["data"]["gameProgress"]
    assert progress["currentQuestion"] == 7
    assert progress["gameType"] == "orientation"
    assert moved.json()["data"]["credits"] == 0


def test_completed_game_awards_credits_once(client: TestClient, account: dict[str, Any]) -> None:
    headers = account["headers"]

    first = client.put(
        "/api/users/profile/games/riasec",
        json={"gameType": "orientation", "completed": True, "score": 42},
        headers=headers,
    )
    data = first.json()["data"]
    assert data["credits"] == 15
    assert data["recentActivities"][0]["type"] == "game"
    assert "orientation" in data["recentActivities"][0]["text"]

    again = client.put(
        "/api/users/profile/games/riasec",
        json={"completed": True, "score": 50},
        headers=headers,
    )
    assert again.json()["data"]["credits"] == 15
    assert len(again.json()["data"]["recentActivities"]) == 1


def test_register_login_profile_flow(client: TestClient) -> None:
    data = register(client)
    assert data["user"]["email"] == "a@x.com"

    wrong = client.post("/api/auth/login", json={"email": "a@x.com", "password": "wrong"})
    assert wrong.status_code == 401
    assert wrong.json()["error"] == "Invalid email or password"

    profile = _profile(client, auth_headers(data["accessToken"]))
    assert profile["credits"] == 0
    assert profile["education"] == []
    assert profile["preferences"]["theme"] == "auto"
    assert profile["preferences"]["language"] == "fr"
