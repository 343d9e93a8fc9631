"""
Audit trail for mutating operations.

Each handler opens a LogContext, fills in the entity and before/after
snapshots as the service runs, and calls write() once with OK or ERROR.
Records land in the operation_log table and are echoed to the
`houserules.audit` logger.
"""
from __future__ import annotations

import json
import logging
import time
import uuid
import datetime as dt
from typing import Any, Optional

from .db import get_conn

logger = logging.getLogger("houserules.audit")

DDL = """
CREATE TABLE IF NOT EXISTS operation_log (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  ts TEXT NOT NULL,
  user TEXT NOT NULL,
  action TEXT NOT NULL,
  entity_type TEXT,
  entity_id TEXT,
  request_id TEXT,
  before_json TEXT,
  after_json TEXT,
  payload_json TEXT,
  result TEXT,
  err_msg TEXT,
  latency_ms INTEGER
);
CREATE INDEX IF NOT EXISTS idx_log_ts ON operation_log(ts);
CREATE INDEX IF NOT EXISTS idx_log_action ON operation_log(action);
CREATE INDEX IF NOT EXISTS idx_log_entity ON operation_log(entity_type, entity_id);
"""

_COLUMNS = (
    "ts", "user", "action", "entity_type", "entity_id", "request_id",
    "before_json", "after_json", "payload_json", "result", "err_msg", "latency_ms",
)
_INSERT_SQL = "INSERT INTO operation_log({}) VALUES({})".format(
    ",".join(_COLUMNS), ",".join(":" + c for c in _COLUMNS)
)


def ensure_log_schema():
    with get_conn() as conn:
        conn.executescript(DDL)


def _to_json(obj: Any) -> Optional[str]:
    return None if obj is None else json.dumps(obj, ensure_ascii=False)


class LogContext:
    """Audit record for one mutating operation."""

    def __init__(self, action: str, user: str = "anonymous"):
        self.action = action
        self.user = user
        self.request_id = str(uuid.uuid4())
        self.started = time.perf_counter()
        self.entity_type: Optional[str] = None
        self.entity_id: Optional[str] = None
        self.before = self.after = self.payload = None

    def set_entity(self, etype: str, eid):
        self.entity_type, self.entity_id = etype, str(eid)

    def set_before(self, obj): self.before = obj
    def set_after(self, obj): self.after = obj
    def set_payload(self, obj): self.payload = obj

    def write(self, result: str = "OK", err: Optional[str] = None):
        latency_ms = int((time.perf_counter() - self.started) * 1000)
        logger.log(
            logging.WARNING if result == "ERROR" else logging.INFO,
            "%s %s %s/%s by %s (%sms)%s",
            self.action, result, self.entity_type, self.entity_id, self.user, latency_ms,
            f": {err}" if err else "",
        )
        record = {
            "ts": dt.datetime.now(dt.timezone.utc).isoformat(),
            "user": self.user,
            "action": self.action,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "request_id": self.request_id,
            "before_json": _to_json(self.before),
            "after_json": _to_json(self.after),
            "payload_json": _to_json(self.payload),
            "result": result,
            "err_msg": err,
            "latency_ms": latency_ms,
        }
        with get_conn() as conn:
            conn.execute(_INSERT_SQL, record)


# filter name -> (SQL condition, value transform)
_FILTERS = {
    "q": ("(payload_json LIKE :q OR before_json LIKE :q OR after_json LIKE :q)", lambda v: f"%{v}%"),
    "action": ("action = :action", str.upper),
    "user": ("user = :user", str),
    "entity_type": ("entity_type = :entity_type", str),
    "ts_from": ("ts >= :ts_from", str),
    "ts_to": ("ts <= :ts_to", str),
}


def search_logs(q: str | None, action: str | None, ts_from: str | None, ts_to: str | None, page: int, size: int,
                user: str | None = None, entity_type: str | None = None):
    """Newest first. Returns (total matching, page of rows as dicts)."""
    given = {"q": q, "action": action, "user": user, "entity_type": entity_type, "ts_from": ts_from, "ts_to": ts_to}
    conds, params = [], {}
    for name, value in given.items():
        if not value:
            continue
        cond, transform = _FILTERS[name]
        conds.append(cond)
        params[name] = transform(value)
    where = f" WHERE {' AND '.join(conds)}" if conds else ""
    with get_conn() as conn:
        total = conn.execute(f"SELECT COUNT(1) AS cnt FROM operation_log{where}", params).fetchone()["cnt"]
        rows = conn.execute(
            f"SELECT * FROM operation_log{where} ORDER BY ts DESC, id DESC LIMIT :limit OFFSET :offset",
            {**params, "limit": size, "offset": (page - 1) * size},
        ).fetchall()
    return total, [dict(r) for r in rows]
