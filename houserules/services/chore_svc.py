from __future__ import annotations

from sqlite3 import Connection
from typing import Any

from ..logs import LogContext
from ..repository import chore_repo, assignment_repo, completion_repo
from .errors import NotFound, BadRequest
from .utils import row_to_dict


def list_chores(conn: Connection) -> list[dict[str, Any]]:
    return [dict(r) for r in chore_repo.list_all(conn)]


def get_chore_with_completions(conn: Connection, chore_id: int) -> dict[str, Any]:
    """Chore with its completion history (newest first) and current assignees."""
    row = chore_repo.get_one(conn, chore_id)
    if row is None:
        raise NotFound("chore_not_found")
    chore = dict(row)
    chore["chore_completions"] = [dict(r) for r in completion_repo.list_for_chore(conn, chore_id)]
    chore["chore_assignments"] = [dict(r) for r in assignment_repo.list_for_chore(conn, chore_id)]
    return chore


def create_chore(conn: Connection, data: dict, log: LogContext) -> dict[str, Any]:
    chore_id = chore_repo.insert(conn, data["name"], data["difficulty"], data["recurrence_days"])
    conn.commit()
    created = row_to_dict(chore_repo.get_one(conn, chore_id))
    log.set_entity("chore", chore_id)
    log.set_after(created)
    return created


def update_chore(conn: Connection, chore_id: int, data: dict, log: LogContext) -> None:
    before = row_to_dict(chore_repo.get_one(conn, chore_id))
    if before is None:
        raise NotFound("chore_not_found")
    body_id = data.get("id")
    if body_id is not None and int(body_id) != chore_id:
        raise BadRequest("chore_id_mismatch")
    chore_repo.update(conn, chore_id, data["name"], data["difficulty"], data["recurrence_days"])
    conn.commit()
    log.set_entity("chore", chore_id)
    log.set_before(before)
    log.set_after(row_to_dict(chore_repo.get_one(conn, chore_id)))


def delete_chore(conn: Connection, chore_id: int, log: LogContext) -> None:
    """Assignments and completions of the chore go with it (ON DELETE CASCADE)."""
    before = row_to_dict(chore_repo.get_one(conn, chore_id))
    if before is None:
        raise NotFound("chore_not_found")
    chore_repo.delete(conn, chore_id)
    conn.commit()
    log.set_entity("chore", chore_id)
    log.set_before(before)
