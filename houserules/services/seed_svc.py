"""
Initial data written on first initialization: the Admin role, the
administrator account and profile, and a handful of sample chores,
assignments and completions.

`seed_once` only touches a database that has no accounts or profiles yet, so
later restarts never bring back deleted chores, removed assignments or a
revoked Admin role. `seed` is the unconditional variant; its inserts are
INSERT OR IGNORE, so running it again leaves existing rows alone.
"""
from __future__ import annotations

import logging
from sqlite3 import Connection

from werkzeug.security import generate_password_hash

from ..db import get_admin_password, transaction
from ..identity import ADMIN_ROLE
from ..repository import identity_repo, profile_repo, chore_repo, assignment_repo, completion_repo

logger = logging.getLogger(__name__)

ADMIN_ROLE_ID = "c3aaeb97-d2ba-4a53-a521-4eea61e59b35"
ADMIN_USER_ID = "dbc40bc6-0829-4ac5-a3ed-180f5e916a5f"
ADMIN_USER_NAME = "Administrator"
ADMIN_EMAIL = "admina@strator.comx"

ADMIN_PROFILE = {"id": 1, "first_name": "Admina", "last_name": "Strator", "address": "101 Main Street"}

CHORES = [
    # id, name, difficulty, recurrence_days
    (1, "Mow the lawn", 4, 7),
    (2, "Fold the laundry", 1, 2),
    (3, "Load and unload dishwasher", 2, 1),
    (4, "Mop the floors", 4, 2),
    (5, "Clean the bathrooms", 5, 5),
]

ASSIGNMENTS = [
    # id, chore_id, user_profile_id
    (1, 4, 1),
    (2, 1, 1),
]

COMPLETIONS = [
    # id, chore_id, user_profile_id, completed_on
    (1, 2, 1, "2023-10-04T00:00:00+00:00"),
    (2, 3, 1, "2023-10-04T00:00:00+00:00"),
    (3, 5, 1, "2023-10-05T00:00:00+00:00"),
]


def is_fresh(conn: Connection) -> bool:
    """True while no account and no profile has been created yet."""
    row = conn.execute(
        "SELECT (SELECT COUNT(1) FROM identity_user) + (SELECT COUNT(1) FROM user_profile) AS cnt"
    ).fetchone()
    return row["cnt"] == 0


def _resolve_password(admin_password: str | None) -> str:
    password = admin_password or get_admin_password()
    if not password:
        raise ValueError("admin password not configured (HOUSERULES_ADMIN_PASSWORD or config.yaml admin_password)")
    return password


def _insert_seed_rows(conn: Connection, password: str) -> dict:
    identity_repo.insert_role(conn, ADMIN_ROLE_ID, ADMIN_ROLE)
    identity_repo.insert_user(
        conn, ADMIN_USER_ID, ADMIN_USER_NAME, ADMIN_EMAIL, generate_password_hash(password), or_ignore=True
    )
    identity_repo.add_user_role(conn, ADMIN_USER_ID, ADMIN_ROLE_ID)
    profile_repo.insert_with_id(
        conn, ADMIN_PROFILE["id"], ADMIN_PROFILE["first_name"], ADMIN_PROFILE["last_name"],
        ADMIN_PROFILE["address"], ADMIN_USER_ID,
    )
    for chore_id, name, difficulty, recurrence_days in CHORES:
        chore_repo.insert_with_id(conn, chore_id, name, difficulty, recurrence_days)
    for assignment_id, chore_id, profile_id in ASSIGNMENTS:
        assignment_repo.insert_with_id(conn, assignment_id, chore_id, profile_id)
    for completion_id, chore_id, profile_id, completed_on in COMPLETIONS:
        completion_repo.insert_with_id(conn, completion_id, chore_id, profile_id, completed_on)
    return {"chores": len(CHORES), "assignments": len(ASSIGNMENTS), "completions": len(COMPLETIONS)}


def seed(conn: Connection, admin_password: str | None = None) -> dict:
    """Write the seed rows unconditionally; rows that already exist are left alone."""
    password = _resolve_password(admin_password)
    with transaction(conn):
        res = _insert_seed_rows(conn, password)
    logger.info("seed applied: %s", res)
    return res


def seed_once(conn: Connection, admin_password: str | None = None) -> dict | None:
    """Seed a brand-new database. Returns None when it already holds accounts or profiles."""
    password = _resolve_password(admin_password)
    with transaction(conn):
        if not is_fresh(conn):
            logger.info("database already initialized; seed skipped")
            return None
        res = _insert_seed_rows(conn, password)
    logger.info("seed applied: %s", res)
    return res
