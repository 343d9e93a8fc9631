from __future__ import annotations

from sqlite3 import Connection


def list_all(conn: Connection):
    return conn.execute(
        "SELECT id, name, difficulty, recurrence_days FROM chore ORDER BY id"
    ).fetchall()


def get_one(conn: Connection, chore_id: int):
    return conn.execute(
        "SELECT id, name, difficulty, recurrence_days FROM chore WHERE id=?",
        (chore_id,),
    ).fetchone()


def exists(conn: Connection, chore_id: int) -> bool:
    row = conn.execute("SELECT 1 FROM chore WHERE id=?", (chore_id,)).fetchone()
    return row is not None


def insert(conn: Connection, name: str, difficulty: int, recurrence_days: int) -> int:
    cur = conn.execute(
        "INSERT INTO chore(name, difficulty, recurrence_days) VALUES(?,?,?)",
        (name, int(difficulty), int(recurrence_days)),
    )
    return int(cur.lastrowid)


def insert_with_id(conn: Connection, chore_id: int, name: str, difficulty: int, recurrence_days: int):
    conn.execute(
        "INSERT OR IGNORE INTO chore(id, name, difficulty, recurrence_days) VALUES(?,?,?,?)",
        (chore_id, name, difficulty, recurrence_days),
    )


def update(conn: Connection, chore_id: int, name: str, difficulty: int, recurrence_days: int):
    # id is never part of the SET list
    conn.execute(
        "UPDATE chore SET name=?, difficulty=?, recurrence_days=? WHERE id=?",
        (name, int(difficulty), int(recurrence_days), chore_id),
    )


def delete(conn: Connection, chore_id: int) -> int:
    cur = conn.execute("DELETE FROM chore WHERE id=?", (chore_id,))
    return cur.rowcount
