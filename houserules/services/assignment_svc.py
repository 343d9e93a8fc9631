from __future__ import annotations

import logging
from sqlite3 import Connection

from ..db import transaction
from ..logs import LogContext
from ..repository import chore_repo, profile_repo, assignment_repo, completion_repo
from .errors import NotFound
from .utils import utc_now_iso

logger = logging.getLogger(__name__)


def _ensure_refs(conn: Connection, chore_id: int, user_profile_id: int):
    # both ends must exist before anything is written
    if not chore_repo.exists(conn, chore_id):
        raise NotFound("chore_not_found")
    if not profile_repo.exists(conn, user_profile_id):
        raise NotFound("user_profile_not_found")


def complete_chore(conn: Connection, chore_id: int, user_profile_id: int, log: LogContext) -> dict:
    """Append a completion stamped with the server clock. Any user may complete any chore."""
    _ensure_refs(conn, chore_id, user_profile_id)
    completed_on = utc_now_iso()
    completion_id = completion_repo.insert(conn, chore_id, user_profile_id, completed_on)
    conn.commit()
    rec = {
        "id": completion_id,
        "chore_id": chore_id,
        "user_profile_id": user_profile_id,
        "completed_on": completed_on,
    }
    log.set_entity("chore_completion", completion_id)
    log.set_after(rec)
    return rec


def assign_chore(conn: Connection, chore_id: int, user_profile_id: int, log: LogContext) -> bool:
    """Returns False when the pair was already assigned (nothing inserted)."""
    _ensure_refs(conn, chore_id, user_profile_id)
    log.set_entity("chore", chore_id)
    assignment_id = assignment_repo.insert_if_absent(conn, chore_id, user_profile_id)
    if assignment_id is None:
        logger.info("chore %s already assigned to profile %s", chore_id, user_profile_id)
        return False
    log.set_after({"id": assignment_id, "chore_id": chore_id, "user_profile_id": user_profile_id})
    return True


def unassign_chore(conn: Connection, chore_id: int, user_profile_id: int, log: LogContext) -> int:
    """Remove every assignment row for the pair; NotFound when there is none."""
    with transaction(conn):
        removed = assignment_repo.delete_pair(conn, chore_id, user_profile_id)
        if removed == 0:
            raise NotFound("chore_assignment_not_found")
    log.set_entity("chore", chore_id)
    log.set_before({"chore_id": chore_id, "user_profile_id": user_profile_id, "rows": removed})
    return removed
