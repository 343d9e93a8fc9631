import os
import sys
import sqlite3
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

ADMIN_PASSWORD = "admin-test-pw"
USER_PASSWORD = "user-test-pw"

os.environ["HOUSERULES_ADMIN_PASSWORD"] = ADMIN_PASSWORD

ADMIN_AUTH = ("Administrator", ADMIN_PASSWORD)
USER_AUTH = ("chorekid", USER_PASSWORD)


@pytest.fixture(scope="session")
def tmp_db_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("db") / "houserules_test.db"
    # Point the app to this temp DB
    os.environ["HOUSERULES_DB_PATH"] = str(path)
    from houserules.db import get_conn, ensure_schema
    from houserules.logs import ensure_log_schema
    with get_conn() as conn:
        ensure_schema(conn)
    ensure_log_schema()
    return str(path)


@pytest.fixture(autouse=True)
def _clean_db(tmp_db_path):
    # Wipe and reseed before each test for isolation
    # Safety: ensure we only ever wipe the temp DB, never a real one
    assert os.environ.get("HOUSERULES_DB_PATH") == tmp_db_path, "Refusing to clean non-temp DB"
    tables = [
        "chore_completion",
        "chore_assignment",
        "user_profile",
        "identity_user_role",
        "identity_user",
        "identity_role",
        "chore",
        "config",
        "operation_log",
        "sqlite_sequence",
    ]
    conn = sqlite3.connect(tmp_db_path)
    try:
        for t in tables:
            conn.execute(f"DELETE FROM {t}")
        conn.commit()
    finally:
        conn.close()

    from houserules.db import get_conn
    from houserules.services.config_svc import ensure_default_config
    from houserules.services.seed_svc import seed
    with get_conn() as c:
        ensure_default_config(c)
        seed(c)
    yield


@pytest.fixture()
def conn(tmp_db_path):
    from houserules.db import get_conn
    with get_conn() as c:
        yield c


@pytest.fixture()
def client(tmp_db_path):
    from houserules.api import app
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture()
def regular_user(client):
    """A registered account without any role; returns its profile JSON."""
    res = client.post(
        "/api/auth/register",
        json={
            "user_name": USER_AUTH[0],
            "email": "kid@example.com",
            "password": USER_AUTH[1],
            "first_name": "Chore",
            "last_name": "Kid",
            "address": "12 Side Street",
        },
    )
    assert res.status_code == 201, res.text
    return res.json()
