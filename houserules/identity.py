"""
Identity capability used by the API layer.

Credentials, roles and user-role associations belong to the identity store.
Handlers only see the `IdentityStore` contract; `SqliteIdentityStore` is the
default adapter over the identity_* tables and is injected per request through
`get_identity_store`, so a different backend can be swapped in with
`app.dependency_overrides`. Password hashes are produced and checked by
werkzeug.security.
"""
from __future__ import annotations

import sqlite3
import uuid
from dataclasses import dataclass
from typing import Optional, Protocol

from fastapi import Depends
from werkzeug.security import check_password_hash, generate_password_hash

from .db import get_db
from .repository import identity_repo

ADMIN_ROLE = "Admin"


@dataclass(frozen=True)
class IdentityAccount:
    id: str
    user_name: str
    email: str


class IdentityStore(Protocol):
    def verify_credentials(self, user_name: str, password: str) -> Optional[str]: ...
    def get_account(self, identity_id: str) -> Optional[IdentityAccount]: ...
    def list_roles_for(self, identity_id: str) -> list[str]: ...
    def add_role(self, identity_id: str, role_name: str) -> bool: ...
    def remove_role(self, identity_id: str, role_name: str) -> bool: ...
    def create_account(self, user_name: str, email: str, password: str) -> str: ...


class AccountExists(Exception):
    pass


class SqliteIdentityStore:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def verify_credentials(self, user_name: str, password: str) -> Optional[str]:
        row = identity_repo.get_user_by_name(self.conn, user_name)
        if row is None or not check_password_hash(row["password_hash"], password):
            return None
        return row["id"]

    def get_account(self, identity_id: str) -> Optional[IdentityAccount]:
        row = identity_repo.get_user(self.conn, identity_id)
        if row is None:
            return None
        return IdentityAccount(id=row["id"], user_name=row["user_name"], email=row["email"])

    def list_roles_for(self, identity_id: str) -> list[str]:
        return identity_repo.role_names_for(self.conn, identity_id)

    def add_role(self, identity_id: str, role_name: str) -> bool:
        """False when the role is not defined. Re-adding an existing association is a no-op."""
        role = identity_repo.get_role_by_name(self.conn, role_name)
        if role is None:
            return False
        identity_repo.add_user_role(self.conn, identity_id, role["id"])
        return True

    def remove_role(self, identity_id: str, role_name: str) -> bool:
        """False when there was no such association to remove."""
        role = identity_repo.get_role_by_name(self.conn, role_name)
        if role is None:
            return False
        return identity_repo.delete_user_role(self.conn, identity_id, role["id"]) > 0

    def create_account(self, user_name: str, email: str, password: str) -> str:
        if identity_repo.get_user_by_name(self.conn, user_name) is not None:
            raise AccountExists(user_name)
        identity_id = str(uuid.uuid4())
        try:
            identity_repo.insert_user(self.conn, identity_id, user_name, email, generate_password_hash(password))
        except sqlite3.IntegrityError as e:
            # lost a race with a concurrent registration of the same name
            raise AccountExists(user_name) from e
        return identity_id


def get_identity_store(conn: sqlite3.Connection = Depends(get_db)) -> IdentityStore:
    return SqliteIdentityStore(conn)
