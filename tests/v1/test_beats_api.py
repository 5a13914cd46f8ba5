# tests/v1/test_beats_api.py
"""Tests for beat catalogue and rating endpoints."""

from datetime import timedelta

from fastapi import status

from beat_market.db.time import utcnow
from beat_market.services.ratings import RatingService


def test_create_beat(client, auth_headers, seller) -> None:
    response = client.post(
        "/api/v1/beats/",
        json={"title": "Midnight", "price": "24.99", "tags": ["trap", "dark"]},
        headers=auth_headers(seller),
    )
    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["price"] == 24.99
    assert body["tags"] == ["dark", "trap"]
    assert body["owner_user_id"] == seller.id


def test_create_beat_requires_auth(client) -> None:
    response = client.post("/api/v1/beats/", json={"title": "x", "price": "1"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_create_beat_with_negative_price(client, auth_headers, seller) -> None:
    response = client.post(
        "/api/v1/beats/", json={"title": "x", "price": "-3"}, headers=auth_headers(seller)
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_list_and_get_beat(client, beat) -> None:
    listing = client.get("/api/v1/beats/")
    assert listing.status_code == status.HTTP_200_OK
    assert listing.json()["total"] == 1
    assert listing.json()["beats"][0]["id"] == beat.id

    single = client.get(f"/api/v1/beats/{beat.id}")
    assert single.json()["title"] == beat.title


def test_get_missing_beat(client) -> None:
    response = client.get("/api/v1/beats/999999")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "beat not found"


def test_mine_lists_only_callers_beats(client, auth_headers, make_beat, make_user, seller) -> None:
    mine = make_beat(seller)
    make_beat(make_user())

    response = client.get("/api/v1/beats/mine", headers=auth_headers(seller))

    assert [b["id"] for b in response.json()["beats"]] == [mine.id]


def test_update_beat_by_stranger_is_forbidden(client, auth_headers, beat, buyer) -> None:
    response = client.put(
        f"/api/v1/beats/{beat.id}", json={"title": "stolen"}, headers=auth_headers(buyer)
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_update_beat_by_owner(client, auth_headers, beat, seller) -> None:
    response = client.put(
        f"/api/v1/beats/{beat.id}", json={"price": "80.00"}, headers=auth_headers(seller)
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["price"] == 80.0
    assert response.json()["title"] == beat.title


def test_delete_beat(client, auth_headers, beat, seller) -> None:
    response = client.delete(f"/api/v1/beats/{beat.id}", headers=auth_headers(seller))
    assert response.status_code == status.HTTP_200_OK
    assert client.get(f"/api/v1/beats/{beat.id}").status_code == status.HTTP_404_NOT_FOUND


def test_delete_purchased_beat_conflicts(
    client, auth_headers, beat, seller, buyer, platform_account
) -> None:
    client.post(f"/api/v1/beats/{beat.id}/purchase", headers=auth_headers(buyer))

    response = client.delete(f"/api/v1/beats/{beat.id}", headers=auth_headers(seller))

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["detail"] == "has purchases"


class TestRatingEndpoints:
    def test_rate_and_read_summary(self, client, auth_headers, beat, buyer) -> None:
        first = client.post(
            f"/api/v1/beats/{beat.id}/rating", json={"value": 3}, headers=auth_headers(buyer)
        )
        second = client.post(
            f"/api/v1/beats/{beat.id}/rating", json={"value": 5}, headers=auth_headers(buyer)
        )
        assert first.status_code == second.status_code == status.HTTP_200_OK
        assert first.json()["id"] == second.json()["id"]

        summary = client.get(f"/api/v1/beats/{beat.id}/rating", headers=auth_headers(buyer))
        assert summary.json() == {"user_rating": 5, "average_rating": 5.0, "ratings_count": 1}

    def test_anonymous_summary(self, client, beat) -> None:
        response = client.get(f"/api/v1/beats/{beat.id}/rating")
        assert response.json() == {"user_rating": 0, "average_rating": 0.0, "ratings_count": 0}

    def test_out_of_range_rating(self, client, auth_headers, beat, buyer) -> None:
        for value in (0, 6):
            response = client.post(
                f"/api/v1/beats/{beat.id}/rating",
                json={"value": value},
                headers=auth_headers(buyer),
            )
            assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_rated_beats(self, client, auth_headers, db_session, beat, buyer) -> None:
        RatingService(db_session).submit_rating(beat.id, buyer.id, 4)

        response = client.get("/api/v1/beats/rated?score=4", headers=auth_headers(buyer))

        assert response.status_code == status.HTTP_200_OK
        entry = response.json()["beats"][0]
        assert entry["beat"]["id"] == beat.id
        assert entry["user_rating"] == 4


class TestPopularEndpoint:
    def test_popular_defaults_to_month(
        self, client, db_session, make_beat, make_user, seller
    ) -> None:
        recent = make_beat(seller, created_at=utcnow() - timedelta(days=2))
        make_beat(seller, created_at=utcnow() - timedelta(days=400))
        RatingService(db_session).submit_rating(recent.id, make_user().id, 5)

        response = client.get("/api/v1/beats/popular")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert [entry["beat"]["id"] for entry in body] == [recent.id]
        assert body[0]["average_rating"] == 5.0
        assert body[0]["ratings_count"] == 1

    def test_unknown_period_is_rejected(self, client) -> None:
        response = client.get("/api/v1/beats/popular?period=week")
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_update_beat_rejects_null_fields(client, auth_headers, beat, seller) -> None:
    for field in ("title", "description", "image_ref", "audio_ref", "author_display_name", "price"):
        response = client.put(
            f"/api/v1/beats/{beat.id}", json={field: None}, headers=auth_headers(seller)
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST, field

    current = client.get(f"/api/v1/beats/{beat.id}").json()
    assert current["title"] == beat.title
    assert current["description"] == "Test beat"


def test_update_beat_with_null_tags_clears_them(client, auth_headers, beat, seller) -> None:
    response = client.put(
        f"/api/v1/beats/{beat.id}", json={"tags": None}, headers=auth_headers(seller)
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["tags"] == []


def test_create_beat_with_oversized_price(client, auth_headers, seller) -> None:
    response = client.post(
        "/api/v1/beats/",
        json={"title": "Gold", "price": "10000000000.00"},
        headers=auth_headers(seller),
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
