"""Tests for rating endpoints."""

from fastapi import status


def test_rating_categories(client, rating_categories) -> None:
    response = client.get("/api/v1/rating-categories")
    assert [item["name"] for item in response.json()] == ["Technical", "Physical"]


def test_rate_player_and_summary(client, player, rating_categories, auth_token, other_auth_token) -> None:
    technical, physical = rating_categories
    url = f"/api/v1/players/{player.id}/ratings"

    created = client.post(
        url, json={"category_id": technical.id, "rating": 8, "notes": "Silky"}, headers=auth_token
    )
    assert created.status_code == status.HTTP_201_CREATED
    assert created.json()["rating"] == 8.0
    client.post(url, json={"category_id": technical.id, "rating": 7}, headers=other_auth_token)
    client.post(url, json={"category_id": physical.id, "rating": 6}, headers=auth_token)

    averages = client.get(url).json()
    assert [(item["category_name"], item["average"]) for item in averages] == [
        ("Technical", 7.5),
        ("Physical", 6.0),
    ]

    summary = client.get(f"{url}/summary").json()
    assert summary["rating_count"] == 3
    assert summary["overall_average"] == 7.0


def test_rating_out_of_range(client, player, rating_categories, auth_token) -> None:
    response = client.post(
        f"/api/v1/players/{player.id}/ratings",
        json={"category_id": rating_categories[0].id, "rating": 11},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_update_rating_owner_only(client, player, rating_categories, auth_token, other_auth_token) -> None:
    rating = client.post(
        f"/api/v1/players/{player.id}/ratings",
        json={"category_id": rating_categories[0].id, "rating": 5},
        headers=auth_token,
    ).json()

    denied = client.put(f"/api/v1/ratings/{rating['id']}", json={"rating": 9}, headers=other_auth_token)
    assert denied.status_code == status.HTTP_403_FORBIDDEN

    updated = client.put(f"/api/v1/ratings/{rating['id']}", json={"rating": 9}, headers=auth_token)
    assert updated.status_code == status.HTTP_200_OK
    assert updated.json()["rating"] == 9.0
