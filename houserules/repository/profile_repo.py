from __future__ import annotations

from sqlite3 import Connection

_COLS = "p.id, p.first_name, p.last_name, p.address, p.identity_user_id"


def list_all(conn: Connection):
    return conn.execute(f"SELECT {_COLS} FROM user_profile p ORDER BY p.id").fetchall()


def list_with_identity(conn: Connection):
    sql = (
        f"SELECT {_COLS}, u.email, u.user_name "
        "FROM user_profile p LEFT JOIN identity_user u ON u.id = p.identity_user_id "
        "ORDER BY p.id"
    )
    return conn.execute(sql).fetchall()


def get_one(conn: Connection, profile_id: int):
    return conn.execute(f"SELECT {_COLS} FROM user_profile p WHERE p.id=?", (profile_id,)).fetchone()


def get_by_identity(conn: Connection, identity_user_id: str):
    sql = (
        f"SELECT {_COLS}, u.email, u.user_name "
        "FROM user_profile p LEFT JOIN identity_user u ON u.id = p.identity_user_id "
        "WHERE p.identity_user_id=?"
    )
    return conn.execute(sql, (identity_user_id,)).fetchone()


def exists(conn: Connection, profile_id: int) -> bool:
    row = conn.execute("SELECT 1 FROM user_profile WHERE id=?", (profile_id,)).fetchone()
    return row is not None


def insert(conn: Connection, first_name: str, last_name: str, address: str, identity_user_id: str) -> int:
    cur = conn.execute(
        "INSERT INTO user_profile(first_name, last_name, address, identity_user_id) VALUES(?,?,?,?)",
        (first_name, last_name, address, identity_user_id),
    )
    return int(cur.lastrowid)


def insert_with_id(conn: Connection, profile_id: int, first_name: str, last_name: str, address: str, identity_user_id: str):
    conn.execute(
        "INSERT OR IGNORE INTO user_profile(id, first_name, last_name, address, identity_user_id) VALUES(?,?,?,?,?)",
        (profile_id, first_name, last_name, address, identity_user_id),
    )
