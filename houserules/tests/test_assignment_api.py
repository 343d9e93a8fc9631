from __future__ import annotations

from houserules.db import get_conn

from conftest import ADMIN_AUTH, USER_AUTH


def _pair_count(chore_id: int, profile_id: int) -> int:
    with get_conn() as conn:
        row = conn.execute(
            "SELECT COUNT(1) AS cnt FROM chore_assignment WHERE chore_id=? AND user_profile_id=?",
            (chore_id, profile_id),
        ).fetchone()
    return row["cnt"]


def test_assign_then_unassign(client, regular_user):
    uid = regular_user["id"]
    res = client.post("/api/chore/2/assign", params={"userId": uid}, auth=ADMIN_AUTH)
    assert res.status_code == 204
    assert _pair_count(2, uid) == 1

    profile = client.get(f"/api/userprofile/{uid}", auth=USER_AUTH).json()
    assert [a["chore"]["name"] for a in profile["chore_assignments"]] == ["Fold the laundry"]

    res = client.post("/api/chore/2/unassign", params={"userId": uid}, auth=USER_AUTH)
    assert res.status_code == 204
    assert _pair_count(2, uid) == 0


def test_assign_same_pair_twice_keeps_one_row(client):
    for _ in range(2):
        res = client.post("/api/chore/3/assign", params={"userId": 1}, auth=ADMIN_AUTH)
        assert res.status_code == 204
    assert _pair_count(3, 1) == 1


def test_unassign_removes_every_matching_row(client):
    # rows written before duplicates were refused
    with get_conn() as conn:
        conn.execute("INSERT INTO chore_assignment(chore_id, user_profile_id) VALUES(5, 1)")
        conn.execute("INSERT INTO chore_assignment(chore_id, user_profile_id) VALUES(5, 1)")
    assert _pair_count(5, 1) == 2

    res = client.post("/api/chore/5/unassign", params={"userId": 1}, auth=ADMIN_AUTH)
    assert res.status_code == 204
    assert _pair_count(5, 1) == 0
    # other assignments of the same user are untouched
    assert _pair_count(4, 1) == 1


def test_unassign_without_match_is_404(client):
    res = client.post("/api/chore/2/unassign", params={"userId": 1}, auth=ADMIN_AUTH)
    assert res.status_code == 404
    assert res.json()["detail"] == "chore_assignment_not_found"


def test_assign_unknown_references_are_404(client):
    assert client.post("/api/chore/77/assign", params={"userId": 1}, auth=ADMIN_AUTH).status_code == 404
    res = client.post("/api/chore/2/assign", params={"userId": 77}, auth=ADMIN_AUTH)
    assert res.status_code == 404
    assert res.json()["detail"] == "user_profile_not_found"
    assert _pair_count(2, 77) == 0


def test_assign_access_follows_setting(client, regular_user):
    uid = regular_user["id"]
    assert client.post("/api/chore/1/assign", params={"userId": uid}, auth=USER_AUTH).status_code == 403

    res = client.post(
        "/api/settings/update",
        json={"updates": {"assign_access": "authenticated"}},
        auth=ADMIN_AUTH,
    )
    assert res.status_code == 200
    assert client.post("/api/chore/1/assign", params={"userId": uid}, auth=USER_AUTH).status_code == 204
    assert client.post("/api/chore/1/assign", params={"userId": uid}).status_code == 401


def test_insert_if_absent_from_two_connections_keeps_one_row():
    from houserules.repository import assignment_repo

    with get_conn() as a, get_conn() as b:
        assert assignment_repo.insert_if_absent(a, 3, 1) is not None
        assert assignment_repo.insert_if_absent(b, 3, 1) is None
    assert _pair_count(3, 1) == 1
