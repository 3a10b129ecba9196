# tests/v1/test_admin_api.py
"""Tests for administrator endpoints."""

from fastapi import status

ADMIN = {"pin": "99999"}


def test_leaderboard_requires_admin_pin(client) -> None:
    assert client.get("/api/v1/admin/results", params={"pin": "12345"}).status_code == 403
    assert client.get("/api/v1/admin/results").status_code == 422


def test_leaderboard(client, full_ballot) -> None:
    for address, number in (("192.0.2.1", 2), ("192.0.2.2", 2), ("192.0.2.3", 1)):
        client.post(
            "/api/v1/voting/vote",
            json={"pin": "12345", "category": "PRINCE", "candidateNumber": number},
            headers={"X-Forwarded-For": address},
        )

    response = client.get("/api/v1/admin/results", params=ADMIN)

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert len(body) == 10
    assert (body[0]["category"], body[0]["candidateNumber"], body[0]["voteCount"]) == ("PRINCE", 2, 2)
    assert body[0]["percentage"] == 66.67
    assert body[1]["voteCount"] == 1


def test_rate_limit_status_and_reset(client) -> None:
    key = "203.0.113.50"
    for _ in range(6):
        client.post("/api/v1/auth/verify-pin", json={"pin": "00000"}, headers={"X-Forwarded-For": key})

    standing = client.get(f"/api/v1/admin/rate-limit/{key}", params=ADMIN)

    assert standing.status_code == status.HTTP_200_OK
    body = standing.json()
    assert body["key"] == key
    assert body["attempts"] == 5
    assert body["maxAttempts"] == 5
    assert body["lockedOut"] is True
    assert 0 < body["retryAfterSeconds"] <= 300

    cleared = client.delete(f"/api/v1/admin/rate-limit/{key}", params=ADMIN)
    assert cleared.status_code == status.HTTP_204_NO_CONTENT

    retry = client.post("/api/v1/auth/verify-pin", json={"pin": "12345"}, headers={"X-Forwarded-For": key})
    assert retry.status_code == status.HTTP_200_OK


def test_rate_limit_reset_requires_admin_pin(client) -> None:
    response = client.delete("/api/v1/admin/rate-limit/203.0.113.50", params={"pin": "12345"})

    assert response.status_code == status.HTTP_403_FORBIDDEN
