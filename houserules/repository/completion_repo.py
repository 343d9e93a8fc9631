from __future__ import annotations

from sqlite3 import Connection


def list_for_profile(conn: Connection, profile_id: int):
    sql = (
        "SELECT cc.id, cc.chore_id, cc.user_profile_id, cc.completed_on, "
        "c.name AS chore_name, c.difficulty AS chore_difficulty, c.recurrence_days AS chore_recurrence_days "
        "FROM chore_completion cc JOIN chore c ON c.id = cc.chore_id "
        "WHERE cc.user_profile_id=? ORDER BY cc.completed_on DESC, cc.id DESC"
    )
    return conn.execute(sql, (profile_id,)).fetchall()


def list_for_chore(conn: Connection, chore_id: int):
    return conn.execute(
        "SELECT id, chore_id, user_profile_id, completed_on FROM chore_completion "
        "WHERE chore_id=? ORDER BY completed_on DESC, id DESC",
        (chore_id,),
    ).fetchall()


def insert(conn: Connection, chore_id: int, profile_id: int, completed_on: str) -> int:
    cur = conn.execute(
        "INSERT INTO chore_completion(chore_id, user_profile_id, completed_on) VALUES(?,?,?)",
        (chore_id, profile_id, completed_on),
    )
    return int(cur.lastrowid)


def insert_with_id(conn: Connection, completion_id: int, chore_id: int, profile_id: int, completed_on: str):
    conn.execute(
        "INSERT OR IGNORE INTO chore_completion(id, chore_id, user_profile_id, completed_on) VALUES(?,?,?,?)",
        (completion_id, chore_id, profile_id, completed_on),
    )
