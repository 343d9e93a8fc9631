from __future__ import annotations

from sqlite3 import Connection


def get_user(conn: Connection, user_id: str):
    return conn.execute(
        "SELECT id, user_name, email, password_hash FROM identity_user WHERE id=?",
        (user_id,),
    ).fetchone()


def get_user_by_name(conn: Connection, user_name: str):
    return conn.execute(
        "SELECT id, user_name, email, password_hash FROM identity_user WHERE user_name=?",
        (user_name,),
    ).fetchone()


def insert_user(conn: Connection, user_id: str, user_name: str, email: str, password_hash: str, or_ignore: bool = False):
    verb = "INSERT OR IGNORE" if or_ignore else "INSERT"
    conn.execute(
        f"{verb} INTO identity_user(id, user_name, email, password_hash) VALUES(?,?,?,?)",
        (user_id, user_name, email, password_hash),
    )


def get_role_by_name(conn: Connection, name: str):
    return conn.execute("SELECT id, name FROM identity_role WHERE name=?", (name,)).fetchone()


def insert_role(conn: Connection, role_id: str, name: str):
    conn.execute("INSERT OR IGNORE INTO identity_role(id, name) VALUES(?,?)", (role_id, name))


def add_user_role(conn: Connection, user_id: str, role_id: str) -> bool:
    cur = conn.execute(
        "INSERT OR IGNORE INTO identity_user_role(user_id, role_id) VALUES(?,?)",
        (user_id, role_id),
    )
    return cur.rowcount > 0


def delete_user_role(conn: Connection, user_id: str, role_id: str) -> int:
    cur = conn.execute(
        "DELETE FROM identity_user_role WHERE user_id=? AND role_id=?",
        (user_id, role_id),
    )
    return cur.rowcount


def role_names_for(conn: Connection, user_id: str) -> list[str]:
    # LEFT JOIN: association rows pointing at a missing role come back with NULL name and are skipped
    rows = conn.execute(
        "SELECT r.name FROM identity_user_role ur "
        "LEFT JOIN identity_role r ON r.id = ur.role_id "
        "WHERE ur.user_id=? ORDER BY r.name",
        (user_id,),
    ).fetchall()
    return [r["name"] for r in rows if r["name"] is not None]


def role_names_map(conn: Connection) -> dict[str, list[str]]:
    """user_id -> role names, for every user holding at least one resolvable role."""
    rows = conn.execute(
        "SELECT ur.user_id, r.name FROM identity_user_role ur "
        "LEFT JOIN identity_role r ON r.id = ur.role_id "
        "ORDER BY ur.user_id, r.name"
    ).fetchall()
    out: dict[str, list[str]] = {}
    for r in rows:
        out.setdefault(r["user_id"], [])
        if r["name"] is not None:
            out[r["user_id"]].append(r["name"])
    return out

