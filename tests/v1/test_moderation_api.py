# tests/v1/test_moderation_api.py
"""Tests for moderation endpoints."""

from fastapi import status


def _flag_three_times(client, auth_headers, review, voters) -> None:
    url = f"/api/v1/votes/review/{review.review_id}"
    for voter in voters[:3]:
        client.post(url, json={"vote_type": "flag"}, headers=auth_headers(voter))


def test_admin_removes_flagged_review(client, auth_headers, review, voters, admin) -> None:
    _flag_three_times(client, auth_headers, review, voters)

    response = client.patch(
        f"/api/v1/moderation/reviews/{review.review_id}/status",
        json={"status": "removed", "moderation_note": "abusive language"},
        headers=auth_headers(admin),
    )

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["review"]["status"] == "removed"
    assert body["previous_status"] == "flagged"
    assert body["flag_count"] == 3
    assert body["notification"]["title"] == "Your review has been removed"
    assert body["notification"]["type"] == "error"
    assert body["moderation_note"] == "abusive language"
    assert body["notification"]["message"].endswith("Moderator note: abusive language")


def test_official_approves_flagged_review(client, auth_headers, review, voters, official) -> None:
    _flag_three_times(client, auth_headers, review, voters)

    response = client.patch(
        f"/api/v1/moderation/reviews/{review.review_id}/status",
        json={"status": "approved"},
        headers=auth_headers(official),
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["review"]["status"] == "approved"


def test_citizen_cannot_moderate(client, auth_headers, review, voter) -> None:
    response = client.patch(
        f"/api/v1/moderation/reviews/{review.review_id}/status",
        json={"status": "removed"},
        headers=auth_headers(voter),
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_transition_outside_table_conflicts(client, auth_headers, review, admin) -> None:
    response = client.patch(
        f"/api/v1/moderation/reviews/{review.review_id}/status",
        json={"status": "resolved"},
        headers=auth_headers(admin),
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert "cannot move from approved to resolved" in response.json()["detail"]


def test_unknown_status_is_invalid(client, auth_headers, review, admin) -> None:
    response = client.patch(
        f"/api/v1/moderation/reviews/{review.review_id}/status",
        json={"status": "deleted"},
        headers=auth_headers(admin),
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_missing_review(client, auth_headers, admin) -> None:
    response = client.patch(
        "/api/v1/moderation/reviews/31337/status",
        json={"status": "approved"},
        headers=auth_headers(admin),
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
