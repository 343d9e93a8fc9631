# houserules/services/config_svc.py
from sqlite3 import Connection

from ..logs import LogContext
from .errors import BadRequest

ACCESS_LEVELS = ("public", "authenticated", "admin")

DEFAULTS = {
    # GET /api/userprofile/withroles; the role listing was left ungated originally
    "withroles_access": "authenticated",
    # POST /api/chore/{id}/assign
    "assign_access": "admin",
}

def ensure_default_config(conn: Connection):
    """Make sure every known key exists (existing values are kept)."""
    for k, v in DEFAULTS.items():
        conn.execute(
            "INSERT INTO config(key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO NOTHING",
            (k, v),
        )
    conn.commit()

def get_config(conn: Connection) -> dict:
    rows = conn.execute("SELECT key, value FROM config").fetchall()
    cfg = {r["key"]: r["value"] for r in rows}

    out = {}
    for k, default in DEFAULTS.items():
        v = cfg.get(k)
        out[k] = v if v in ACCESS_LEVELS else default
    return out

def update_config(conn: Connection, upd: dict, log: LogContext) -> list[str]:
    for k, v in upd.items():
        if k not in DEFAULTS:
            raise BadRequest(f"unknown_setting: {k}")
        if v not in ACCESS_LEVELS:
            raise BadRequest(f"invalid_access_level: {v}")
    before = get_config(conn)
    updated = []
    for k, v in upd.items():
        conn.execute(
            "INSERT INTO config(key,value) VALUES(?,?) "
            "ON CONFLICT(key) DO UPDATE SET value=excluded.value",
            (k, str(v))
        )
        updated.append(k)
    conn.commit()
    log.set_before(before); log.set_after(get_config(conn))
    return updated
