from conftest import ADMIN_AUTH


def test_health_and_version(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json().get("status") == "ok"

    v = client.get("/version")
    assert v.status_code == 200
    assert v.json().get("app") == "houserules-api"


def test_seeded_catalog_visible_to_admin(client):
    res = client.get("/api/chore", auth=ADMIN_AUTH)
    assert res.status_code == 200
    names = [c["name"] for c in res.json()]
    assert names == [
        "Mow the lawn",
        "Fold the laundry",
        "Load and unload dishwasher",
        "Mop the floors",
        "Clean the bathrooms",
    ]
