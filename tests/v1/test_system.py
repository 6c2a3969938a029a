"""Tests for application-level endpoints, authentication and error mapping."""

from datetime import timedelta

from fastapi import status

from talent_radar.core.security import create_access_token
from talent_radar.core.settings import settings


def test_health(client) -> None:
    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "ok"}


def test_root_describes_api(client) -> None:
    data = client.get("/").json()
    assert data["name"] == "Talent Radar API"
    assert data["docs"] == "/docs"


def test_malformed_token_is_rejected(client) -> None:
    response = client.get(
        "/api/v1/notifications", headers={"Authorization": "Bearer not-a-token"}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_expired_token_is_rejected(client, test_user) -> None:
    token = create_access_token(test_user.id, expires_delta=timedelta(minutes=-5))
    response = client.get(
        "/api/v1/notifications", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_token_for_deleted_user(client) -> None:
    token = create_access_token(424242)
    response = client.get(
        "/api/v1/notifications", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "User not found"


def test_invalid_token_on_optional_route(client, make_poll) -> None:
    """A bad token is rejected even where signing in is optional."""
    poll = make_poll(is_anonymous=True)
    response = client.post(
        f"/api/v1/polls/{poll.id}/vote",
        json={"option_id": poll.options[0].id},
        headers={"Authorization": "Bearer nonsense"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_validation_errors_map_to_bad_request(client) -> None:
    response = client.get("/api/v1/polls", params={"limit": 0})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "InvalidRequestError"
    assert isinstance(response.json()["detail"], list)


def test_list_routes_use_configured_page_size(client) -> None:
    paths = client.get("/openapi.json").json()["paths"]
    for path in (
        "/api/v1/polls",
        "/api/v1/discussions/threads",
        "/api/v1/notifications",
    ):
        limit = next(p for p in paths[path]["get"]["parameters"] if p["name"] == "limit")
        assert limit["schema"]["default"] == settings.default_page_size
        assert limit["schema"]["maximum"] == settings.max_page_size
