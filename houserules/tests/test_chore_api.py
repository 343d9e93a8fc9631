from __future__ import annotations

import datetime as dt

from houserules.db import get_conn

from conftest import ADMIN_AUTH, USER_AUTH

VACUUM = {"name": "Vacuum", "difficulty": 3, "recurrence_days": 3}


def _now():
    return dt.datetime.now(dt.timezone.utc).replace(microsecond=0)


def test_get_chore_with_completions(client):
    res = client.get("/api/chore/2", auth=ADMIN_AUTH)
    assert res.status_code == 200
    chore = res.json()
    assert chore["name"] == "Fold the laundry"
    assert chore["difficulty"] == 1
    assert chore["recurrence_days"] == 2
    assert [c["id"] for c in chore["chore_completions"]] == [1]
    assert chore["chore_assignments"] == []

    assert client.get("/api/chore/999", auth=ADMIN_AUTH).status_code == 404


def test_create_requires_admin(client, regular_user):
    res = client.post("/api/chore", json=VACUUM, auth=USER_AUTH)
    assert res.status_code == 403

    res = client.post("/api/chore", json=VACUUM)
    assert res.status_code == 401


def test_create_chore_as_admin(client):
    res = client.post("/api/chore", json=VACUUM, auth=ADMIN_AUTH)
    assert res.status_code == 201
    created = res.json()
    assert created["id"] == 6
    assert res.headers["location"] == f"/api/chore/{created['id']}"

    again = client.post("/api/chore", json={**VACUUM, "name": "Dust"}, auth=ADMIN_AUTH).json()
    assert again["id"] > created["id"]

    fetched = client.get(res.headers["location"], auth=ADMIN_AUTH).json()
    for k in ("name", "difficulty", "recurrence_days"):
        assert fetched[k] == VACUUM[k]


def test_create_ignores_client_id(client):
    res = client.post("/api/chore", json={**VACUUM, "id": 1}, auth=ADMIN_AUTH)
    assert res.status_code == 201
    assert res.json()["id"] != 1
    assert client.get("/api/chore/1", auth=ADMIN_AUTH).json()["name"] == "Mow the lawn"


def test_create_validates_fields(client):
    for bad in (
        {**VACUUM, "difficulty": 0},
        {**VACUUM, "difficulty": 6},
        {**VACUUM, "recurrence_days": 0},
        {**VACUUM, "name": "  "},
    ):
        assert client.post("/api/chore", json=bad, auth=ADMIN_AUTH).status_code == 422


def test_update_chore(client):
    body = {"id": 3, "name": "Empty the dishwasher", "difficulty": 3, "recurrence_days": 2}
    res = client.put("/api/chore/3", json=body, auth=ADMIN_AUTH)
    assert res.status_code == 204
    assert res.content == b""

    chore = client.get("/api/chore/3", auth=ADMIN_AUTH).json()
    assert chore["id"] == 3
    assert chore["name"] == "Empty the dishwasher"
    assert chore["difficulty"] == 3
    assert chore["recurrence_days"] == 2


def test_update_id_mismatch_leaves_chore_unchanged(client):
    body = {"id": 4, "name": "Changed", "difficulty": 1, "recurrence_days": 9}
    res = client.put("/api/chore/3", json=body, auth=ADMIN_AUTH)
    assert res.status_code == 400

    for cid, name in ((3, "Load and unload dishwasher"), (4, "Mop the floors")):
        assert client.get(f"/api/chore/{cid}", auth=ADMIN_AUTH).json()["name"] == name


def test_update_missing_chore_is_404(client):
    body = {"id": 42, "name": "Nothing", "difficulty": 1, "recurrence_days": 1}
    assert client.put("/api/chore/42", json=body, auth=ADMIN_AUTH).status_code == 404


def test_update_requires_admin(client, regular_user):
    body = {"id": 3, "name": "Mine now", "difficulty": 1, "recurrence_days": 1}
    assert client.put("/api/chore/3", json=body, auth=USER_AUTH).status_code == 403


def test_delete_chore_cascades(client):
    assert client.delete("/api/chore/999", auth=ADMIN_AUTH).status_code == 404

    # chore 4 is assigned to profile 1 in the seed data
    res = client.delete("/api/chore/4", auth=ADMIN_AUTH)
    assert res.status_code == 204
    assert client.get("/api/chore/4", auth=ADMIN_AUTH).status_code == 404

    with get_conn() as conn:
        left = conn.execute("SELECT COUNT(1) AS cnt FROM chore_assignment WHERE chore_id=4").fetchone()
        assert left["cnt"] == 0

    profile = client.get("/api/userprofile/1", auth=ADMIN_AUTH).json()
    assert [a["chore_id"] for a in profile["chore_assignments"]] == [1]


def test_delete_requires_admin(client, regular_user):
    assert client.delete("/api/chore/1", auth=USER_AUTH).status_code == 403


def test_complete_chore_stamps_server_time(client):
    before = _now()
    res = client.post(
        "/api/chore/2/complete",
        params={"userId": 1},
        json={"completed_on": "1999-01-01T00:00:00+00:00"},
        auth=ADMIN_AUTH,
    )
    after = _now()
    assert res.status_code == 204

    completions = client.get("/api/chore/2", auth=ADMIN_AUTH).json()["chore_completions"]
    assert len(completions) == 2
    newest = completions[0]
    assert newest["user_profile_id"] == 1
    stamped = dt.datetime.fromisoformat(newest["completed_on"])
    assert before <= stamped <= after


def test_any_user_may_complete(client, regular_user):
    res = client.post("/api/chore/1/complete", params={"userId": regular_user["id"]}, auth=USER_AUTH)
    assert res.status_code == 204

    profile = client.get(f"/api/userprofile/{regular_user['id']}", auth=USER_AUTH).json()
    assert [c["chore"]["name"] for c in profile["chore_completions"]] == ["Mow the lawn"]
    assert profile["chore_assignments"] == []


def test_complete_unknown_references_are_404(client):
    res = client.post("/api/chore/99/complete", params={"userId": 1}, auth=ADMIN_AUTH)
    assert res.status_code == 404
    assert res.json()["detail"] == "chore_not_found"

    res = client.post("/api/chore/2/complete", params={"userId": 99}, auth=ADMIN_AUTH)
    assert res.status_code == 404
    assert res.json()["detail"] == "user_profile_not_found"

    with get_conn() as conn:
        cnt = conn.execute("SELECT COUNT(1) AS cnt FROM chore_completion").fetchone()["cnt"]
    assert cnt == 3


def test_complete_requires_user_id(client):
    assert client.post("/api/chore/2/complete", auth=ADMIN_AUTH).status_code == 422
