from __future__ import annotations

import logging
from sqlite3 import Connection
from typing import Any

from ..db import transaction
from ..identity import ADMIN_ROLE, AccountExists, IdentityStore
from ..logs import LogContext
from ..repository import profile_repo, identity_repo, assignment_repo, completion_repo
from .errors import NotFound, BadRequest
from .utils import nested_chore

logger = logging.getLogger(__name__)


def list_profiles(conn: Connection) -> list[dict[str, Any]]:
    return [dict(r) for r in profile_repo.list_all(conn)]


def list_profiles_with_roles(conn: Connection) -> list[dict[str, Any]]:
    """
    Profiles with email / user_name joined from the identity account and the
    account's role names. Association rows whose role no longer resolves are
    dropped from the list instead of failing the whole response.
    """
    roles_by_user = identity_repo.role_names_map(conn)
    items: list[dict[str, Any]] = []
    for r in profile_repo.list_with_identity(conn):
        it = dict(r)
        it["roles"] = roles_by_user.get(r["identity_user_id"], [])
        items.append(it)
    return items


def get_profile_with_chores(conn: Connection, profile_id: int) -> dict[str, Any]:
    row = profile_repo.get_one(conn, profile_id)
    if row is None:
        raise NotFound("user_profile_not_found")
    profile = dict(row)

    assignments = []
    for a in assignment_repo.list_for_profile(conn, profile_id):
        assignments.append({
            "id": a["id"],
            "chore_id": a["chore_id"],
            "user_profile_id": a["user_profile_id"],
            "chore": nested_chore(a),
        })

    completions = []
    for c in completion_repo.list_for_profile(conn, profile_id):
        completions.append({
            "id": c["id"],
            "chore_id": c["chore_id"],
            "user_profile_id": c["user_profile_id"],
            "completed_on": c["completed_on"],
            "chore": nested_chore(c),
        })

    profile["chore_assignments"] = assignments
    profile["chore_completions"] = completions
    return profile


def get_profile_for_identity(conn: Connection, identity: IdentityStore, identity_id: str) -> dict[str, Any]:
    row = profile_repo.get_by_identity(conn, identity_id)
    if row is None:
        raise NotFound("user_profile_not_found")
    profile = dict(row)
    profile["roles"] = identity.list_roles_for(identity_id)
    return profile


def promote(conn: Connection, identity: IdentityStore, identity_id: str, log: LogContext) -> None:
    log.set_entity("identity_user", identity_id)
    if identity.get_account(identity_id) is None:
        raise NotFound("identity_user_not_found")
    before = identity.list_roles_for(identity_id)
    if not identity.add_role(identity_id, ADMIN_ROLE):
        raise NotFound("admin_role_not_found")
    conn.commit()
    log.set_before({"roles": before})
    log.set_after({"roles": identity.list_roles_for(identity_id)})
    logger.info("identity %s promoted to %s", identity_id, ADMIN_ROLE)


def demote(conn: Connection, identity: IdentityStore, identity_id: str, log: LogContext) -> None:
    log.set_entity("identity_user", identity_id)
    before = identity.list_roles_for(identity_id)
    if not identity.remove_role(identity_id, ADMIN_ROLE):
        raise NotFound("admin_role_assignment_not_found")
    conn.commit()
    log.set_before({"roles": before})
    log.set_after({"roles": identity.list_roles_for(identity_id)})
    logger.info("identity %s demoted from %s", identity_id, ADMIN_ROLE)


def register(conn: Connection, identity: IdentityStore, data: dict, log: LogContext) -> dict[str, Any]:
    """Create the identity account and its profile together."""
    try:
        with transaction(conn):
            identity_id = identity.create_account(data["user_name"], data["email"], data["password"])
            profile_id = profile_repo.insert(
                conn, data["first_name"], data["last_name"], data["address"], identity_id
            )
    except AccountExists:
        raise BadRequest("user_name_taken")
    profile = dict(profile_repo.get_one(conn, profile_id))
    log.set_entity("user_profile", profile_id)
    log.set_after(profile)
    return profile
