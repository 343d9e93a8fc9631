from __future__ import annotations

# houserules/db.py
import sqlite3
from contextlib import contextmanager
from typing import Iterator
import os
import yaml

# DB path resolution order:
# 1) HOUSERULES_DB_PATH environment variable (highest priority)
# 2) test_db_path from config.yaml (when running under tests)
# 3) db_path from config.yaml (production default)
# 4) fallback: houserules.db at the project root
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
_ROOT_DB = os.path.join(_PROJECT_ROOT, "houserules.db")
_SCHEMA_PATH = os.path.join(_PROJECT_ROOT, "schema.sql")


def read_config_yaml() -> dict:
    cfg_path = os.environ.get("HOUSERULES_CONFIG") or os.path.join(_PROJECT_ROOT, "config.yaml")
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
        out = {}
        for k in ("db_path", "test_db_path", "admin_password"):
            v = cfg.get(k)
            if isinstance(v, str) and v.strip():
                out[k] = v.strip()
        origins = cfg.get("cors_origins")
        if isinstance(origins, list):
            out["cors_origins"] = [str(o).strip() for o in origins if str(o).strip()]
        return out
    except (OSError, yaml.YAMLError):
        return {}


def get_db_path() -> str:
    env_path = os.environ.get("HOUSERULES_DB_PATH")
    cfg = read_config_yaml()
    cfg_db = cfg.get("db_path")
    cfg_test = cfg.get("test_db_path")
    is_test = (os.environ.get("APP_ENV") == "test") or (os.environ.get("PYTEST_CURRENT_TEST") is not None)

    if env_path:
        path = env_path
    elif is_test and cfg_test:
        path = cfg_test
    elif cfg_db:
        path = cfg_db
    else:
        path = _ROOT_DB

    dirn = os.path.dirname(path) or "."
    os.makedirs(dirn, exist_ok=True)
    return path


def get_admin_password() -> str | None:
    """Password for the seeded administrator account, env first, then config.yaml."""
    return os.environ.get("HOUSERULES_ADMIN_PASSWORD") or read_config_yaml().get("admin_password")


def get_cors_origins() -> list[str]:
    """Browser origins allowed to call the API: HOUSERULES_CORS_ORIGINS (comma separated), then config.yaml."""
    raw = os.environ.get("HOUSERULES_CORS_ORIGINS")
    if raw is not None:
        return [o.strip() for o in raw.split(",") if o.strip()]
    return read_config_yaml().get("cors_origins", [])


@contextmanager
def get_conn(db_path: str | None = None) -> Iterator[sqlite3.Connection]:
    """
    Open a SQLite connection. An explicit db_path wins, otherwise get_db_path().
    Enables foreign_keys and sets row_factory to Row.
    """
    path = db_path or get_db_path()
    conn = sqlite3.connect(
        path,
        detect_types=sqlite3.PARSE_DECLTYPES | sqlite3.PARSE_COLNAMES,
        check_same_thread=False,
        isolation_level=None,
    )
    try:
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.row_factory = sqlite3.Row
        yield conn
    finally:
        conn.close()


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Group several statements on an autocommit connection into one unit."""
    conn.execute("BEGIN")
    try:
        yield conn
    except BaseException:
        conn.execute("ROLLBACK")
        raise
    else:
        conn.execute("COMMIT")


def get_db() -> Iterator[sqlite3.Connection]:
    """FastAPI dependency: one connection per request, closed when the response is done."""
    with get_conn() as conn:
        yield conn


def ensure_schema(conn: sqlite3.Connection):
    with open(_SCHEMA_PATH, "r", encoding="utf-8") as f:
        conn.executescript(f.read())
