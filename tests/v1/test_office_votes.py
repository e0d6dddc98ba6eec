# tests/v1/test_office_votes.py
"""Tests for office-vote endpoints."""

from datetime import datetime

from fastapi import status

from civic_pulse.models import Office, OfficeVote, OfficeVoteKind


def test_vote_on_office(client, auth_headers, office, voter) -> None:
    response = client.post(
        f"/api/v1/office-votes/office/{office.office_id}",
        json={"vote_type": "upvote"},
        headers=auth_headers(voter),
    )

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["vote"]["vote_type"] == "upvote"
    assert body["counts"] == {"upvotes": 1, "downvotes": 0, "total": 1, "ratio": 100}


def test_switch_then_remove(client, auth_headers, office, voters) -> None:
    url = f"/api/v1/office-votes/office/{office.office_id}"
    client.post(url, json={"vote_type": "upvote"}, headers=auth_headers(voters[0]))
    client.post(url, json={"vote_type": "upvote"}, headers=auth_headers(voters[1]))

    switched = client.post(url, json={"vote_type": "downvote"}, headers=auth_headers(voters[0]))
    assert switched.json()["counts"] == {"upvotes": 1, "downvotes": 1, "total": 2, "ratio": 50}

    removed = client.delete(url, headers=auth_headers(voters[0]))
    assert removed.json() == {
        "removed": True,
        "counts": {"upvotes": 1, "downvotes": 0, "total": 1, "ratio": 100},
    }

    missing = client.delete(url, headers=auth_headers(voters[0]))
    assert missing.json()["removed"] is False


def test_vote_on_missing_office(client, auth_headers, voter) -> None:
    response = client.post(
        "/api/v1/office-votes/office/5555",
        json={"vote_type": "downvote"},
        headers=auth_headers(voter),
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_vote_requires_authentication(client, office) -> None:
    response = client.post(
        f"/api/v1/office-votes/office/{office.office_id}", json={"vote_type": "upvote"}
    )
    assert response.status_code in {status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN}


def test_get_office_votes(client, auth_headers, office, voter) -> None:
    url = f"/api/v1/office-votes/office/{office.office_id}"
    client.post(url, json={"vote_type": "downvote"}, headers=auth_headers(voter))

    public = client.get(url).json()
    assert public["counts"]["downvotes"] == 1
    assert public["user_vote"] is None

    mine = client.get(url, headers=auth_headers(voter)).json()
    assert mine["user_vote"]["vote_type"] == "downvote"


def test_user_office_stats(client, auth_headers, office, voter) -> None:
    headers = auth_headers(voter)
    client.post(
        f"/api/v1/office-votes/office/{office.office_id}",
        json={"vote_type": "upvote"},
        headers=headers,
    )

    body = client.get("/api/v1/office-votes/user/stats", headers=headers).json()

    assert (body["upvotes"], body["downvotes"], body["total"]) == (1, 0, 1)
    assert body["voted_offices"][0]["office_name"] == office.name


def test_top_offices_is_public(client, db_session) -> None:
    db_session.add_all(
        [
            Office(name="Zeta Office", office_type="federal", upvote_count=5, downvote_count=0),
            Office(name="Eta Office", office_type="regional", upvote_count=1, downvote_count=7),
        ]
    )
    db_session.commit()

    by_total = client.get("/api/v1/office-votes/top").json()
    by_up = client.get("/api/v1/office-votes/top", params={"type": "upvote", "limit": 1}).json()

    assert [item["office_name"] for item in by_total] == ["Eta Office", "Zeta Office"]
    assert [item["office_name"] for item in by_up] == ["Zeta Office"]
    assert by_up[0]["counts"]["ratio"] == 100


def test_top_offices_rejects_unknown_type(client) -> None:
    response = client.get("/api/v1/office-votes/top", params={"type": "ratio"})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_trends_are_for_moderators(client, auth_headers, voter) -> None:
    response = client.get("/api/v1/office-votes/trends", headers=auth_headers(voter))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_trends_for_admin(client, auth_headers, db_session, office, voters, admin) -> None:
    for voter, day in zip(voters[:3], (3, 1, 3)):
        when = datetime(2026, 10, day, 12)
        db_session.add(
            OfficeVote(
                user_id=voter.user_id,
                office_id=office.office_id,
                vote_type=OfficeVoteKind.UPVOTE,
                created_at=when,
                updated_at=when,
            )
        )
    db_session.commit()

    response = client.get(
        "/api/v1/office-votes/trends",
        params={"office_id": office.office_id, "period": "daily"},
        headers=auth_headers(admin),
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == [
        {"bucket": "2026-10-01", "upvotes": 1, "downvotes": 0, "total": 1},
        {"bucket": "2026-10-03", "upvotes": 2, "downvotes": 0, "total": 2},
    ]
