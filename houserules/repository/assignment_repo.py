from __future__ import annotations

from sqlite3 import Connection

_CHORE_COLS = "c.name AS chore_name, c.difficulty AS chore_difficulty, c.recurrence_days AS chore_recurrence_days"


def list_for_profile(conn: Connection, profile_id: int):
    sql = (
        f"SELECT a.id, a.chore_id, a.user_profile_id, {_CHORE_COLS} "
        "FROM chore_assignment a JOIN chore c ON c.id = a.chore_id "
        "WHERE a.user_profile_id=? ORDER BY a.id"
    )
    return conn.execute(sql, (profile_id,)).fetchall()


def list_for_chore(conn: Connection, chore_id: int):
    return conn.execute(
        "SELECT id, chore_id, user_profile_id FROM chore_assignment WHERE chore_id=? ORDER BY id",
        (chore_id,),
    ).fetchall()


def insert_if_absent(conn: Connection, chore_id: int, profile_id: int) -> int | None:
    """Single-statement insert that adds nothing when the pair is already present; returns the new id or None."""
    cur = conn.execute(
        "INSERT INTO chore_assignment(chore_id, user_profile_id) "
        "SELECT ?, ? WHERE NOT EXISTS "
        "(SELECT 1 FROM chore_assignment WHERE chore_id=? AND user_profile_id=?)",
        (chore_id, profile_id, chore_id, profile_id),
    )
    return int(cur.lastrowid) if cur.rowcount > 0 else None


def insert_with_id(conn: Connection, assignment_id: int, chore_id: int, profile_id: int):
    conn.execute(
        "INSERT OR IGNORE INTO chore_assignment(id, chore_id, user_profile_id) VALUES(?,?,?)",
        (assignment_id, chore_id, profile_id),
    )


def delete_pair(conn: Connection, chore_id: int, profile_id: int) -> int:
    cur = conn.execute(
        "DELETE FROM chore_assignment WHERE chore_id=? AND user_profile_id=?",
        (chore_id, profile_id),
    )
    return cur.rowcount
