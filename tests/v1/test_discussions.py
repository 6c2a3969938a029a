"""Tests for discussion thread and reply endpoints."""

from fastapi import status

from tests.conftest import auth_headers


def _create_thread(client, headers: dict, **extra) -> dict:
    response = client.post(
        "/api/v1/discussions/threads",
        json={"title": "Who replaces Kroos?", "content": "Midfield options", **extra},
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


def test_create_thread_in_category(client, category, auth_token) -> None:
    thread = _create_thread(client, auth_token, category_id=category.id)

    assert thread["category_id"] == category.id
    assert thread["reply_count"] == 0
    listed = client.get("/api/v1/discussions/threads", params={"category_id": category.id})
    assert [item["id"] for item in listed.json()] == [thread["id"]]

    categories = client.get("/api/v1/discussions/categories").json()
    assert [item["name"] for item in categories] == ["General"]


def test_thread_title_is_validated(client, auth_token) -> None:
    response = client.post(
        "/api/v1/discussions/threads",
        json={"title": "x" * 201, "content": "Too long"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_unknown_category(client, auth_token) -> None:
    response = client.post(
        "/api/v1/discussions/threads",
        json={"title": "Lost", "content": "Nowhere", "category_id": 99999},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"] == "CategoryNotFoundError"


def test_search_threads(client, auth_token) -> None:
    _create_thread(client, auth_token, title="Wirtz to Madrid?")
    _create_thread(client, auth_token, title="Best left backs")

    found = client.get("/api/v1/discussions/threads/search", params={"q": "wirtz"})
    assert [item["title"] for item in found.json()] == ["Wirtz to Madrid?"]

    blank = client.get("/api/v1/discussions/threads/search", params={"q": "  "})
    assert blank.status_code == status.HTTP_400_BAD_REQUEST


def test_record_view(client, thread) -> None:
    response = client.post(f"/api/v1/discussions/threads/{thread.id}/view")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["view_count"] == 1


def test_moderation_actions(client, thread, auth_token, moderator, admin) -> None:
    base = f"/api/v1/discussions/threads/{thread.id}"

    assert client.post(f"{base}/pin", headers=auth_token).status_code == status.HTTP_403_FORBIDDEN
    pinned = client.post(f"{base}/pin", headers=auth_headers(moderator))
    assert pinned.json()["is_pinned"] is True
    assert [item["id"] for item in client.get(
        "/api/v1/discussions/threads/pinned"
    ).json()] == [thread.id]

    locked = client.post(f"{base}/lock", headers=auth_headers(moderator))
    assert locked.json()["is_locked"] is True

    not_admin = client.post(f"{base}/feature", headers=auth_headers(moderator))
    assert not_admin.status_code == status.HTTP_403_FORBIDDEN
    featured = client.post(f"{base}/feature", json={"featured": True}, headers=auth_headers(admin))
    assert featured.json()["is_featured"] is True


def test_replies_on_locked_thread(client, thread, other_auth_token, moderator) -> None:
    base = f"/api/v1/discussions/threads/{thread.id}"
    client.post(f"{base}/lock", headers=auth_headers(moderator))

    response = client.post(f"{base}/replies", json={"content": "Late"}, headers=other_auth_token)
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["error"] == "ThreadLockedError"

    client.post(f"{base}/unlock", headers=auth_headers(moderator))
    response = client.post(f"{base}/replies", json={"content": "Now"}, headers=other_auth_token)
    assert response.status_code == status.HTTP_201_CREATED


def test_reply_votes_on_locked_thread(client, thread, auth_token, other_auth_token, moderator) -> None:
    reply = client.post(
        f"/api/v1/discussions/threads/{thread.id}/replies",
        json={"content": "Before the lock"},
        headers=other_auth_token,
    ).json()
    client.post(f"/api/v1/discussions/threads/{thread.id}/lock", headers=auth_headers(moderator))
    url = f"/api/v1/discussions/replies/{reply['id']}/vote"

    response = client.post(url, json={"vote_type": "UPVOTE"}, headers=auth_token)
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["error"] == "ThreadLockedError"
    assert client.get(url, headers=auth_token).json() == {"vote_type": None}


def test_reply_lifecycle(client, thread, auth_token, other_auth_token) -> None:
    base = f"/api/v1/discussions/threads/{thread.id}"
    reply = client.post(
        f"{base}/replies", json={"content": "Tchouameni"}, headers=other_auth_token
    ).json()
    child = client.post(
        f"{base}/replies",
        json={"content": "Or Camavinga", "parent_reply_id": reply["id"]},
        headers=auth_token,
    ).json()

    assert client.get(base).json()["reply_count"] == 2
    children = client.get(f"/api/v1/discussions/replies/{reply['id']}/replies").json()
    assert [item["id"] for item in children] == [child["id"]]

    edited = client.put(
        f"/api/v1/discussions/replies/{reply['id']}",
        json={"content": "Tchouameni, surely"},
        headers=other_auth_token,
    )
    assert edited.json()["content"] == "Tchouameni, surely"

    deleted = client.delete(f"/api/v1/discussions/replies/{child['id']}", headers=auth_token)
    assert deleted.status_code == status.HTTP_204_NO_CONTENT
    assert client.get(base).json()["reply_count"] == 1


def test_reply_votes(client, thread, auth_token, other_auth_token) -> None:
    reply = client.post(
        f"/api/v1/discussions/threads/{thread.id}/replies",
        json={"content": "Hot take"},
        headers=other_auth_token,
    ).json()
    url = f"/api/v1/discussions/replies/{reply['id']}/vote"

    up = client.post(url, json={"vote_type": "UPVOTE"}, headers=auth_token)
    assert (up.json()["upvotes"], up.json()["downvotes"]) == (1, 0)
    down = client.post(url, json={"vote_type": "DOWNVOTE"}, headers=auth_token)
    assert (down.json()["upvotes"], down.json()["downvotes"]) == (0, 1)
    assert client.get(url, headers=auth_token).json() == {"vote_type": "DOWNVOTE"}

    removed = client.delete(url, headers=auth_token)
    assert (removed.json()["upvotes"], removed.json()["downvotes"]) == (0, 0)
    assert removed.json()["vote_type"] is None


def test_unknown_thread(client) -> None:
    response = client.get("/api/v1/discussions/threads/99999")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"] == "ThreadNotFoundError"
