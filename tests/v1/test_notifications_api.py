"""Tests for notification endpoints."""

from fastapi import status


def test_notification_inbox(client, test_user, other_user, follow, auth_token, other_auth_token) -> None:
    follow(other_user, test_user)
    for title in ("First", "Second"):
        client.post(
            "/api/v1/discussions/threads",
            json={"title": title, "content": "Body"},
            headers=auth_token,
        )

    inbox = client.get("/api/v1/notifications", headers=other_auth_token)
    assert inbox.status_code == status.HTTP_200_OK
    assert len(inbox.json()) == 2
    assert {item["notification_type"] for item in inbox.json()} == {"THREAD"}
    assert client.get("/api/v1/notifications/unread-count", headers=other_auth_token).json() == {
        "unread": 2
    }

    first_id = inbox.json()[0]["id"]
    read = client.post(f"/api/v1/notifications/{first_id}/read", headers=other_auth_token)
    assert read.json()["is_read"] is True

    unread = client.get(
        "/api/v1/notifications", params={"unread_only": True}, headers=other_auth_token
    )
    assert len(unread.json()) == 1

    marked = client.post("/api/v1/notifications/read-all", headers=other_auth_token)
    assert marked.json() == {"updated": 1}


def test_cannot_read_someone_elses(client, test_user, other_user, follow, auth_token, other_auth_token) -> None:
    follow(other_user, test_user)
    client.post(
        "/api/v1/discussions/threads",
        json={"title": "Mine", "content": "Body"},
        headers=auth_token,
    )
    notification_id = client.get("/api/v1/notifications", headers=other_auth_token).json()[0]["id"]

    response = client.post(f"/api/v1/notifications/{notification_id}/read", headers=auth_token)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_inbox_requires_authentication(client) -> None:
    response = client.get("/api/v1/notifications")
    assert response.status_code in {status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN}
