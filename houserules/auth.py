"""
Authorization gate.

Every route declares one access level: public, authenticated or admin.
`check_access` is the pure decision; the FastAPI dependencies below resolve the
caller from HTTP Basic credentials through the injected identity store and
translate the decision into 401/403 before the handler touches any data.
"""
from __future__ import annotations

import enum
import sqlite3
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from .db import get_db
from .identity import ADMIN_ROLE, IdentityStore, get_identity_store
from .services.config_svc import get_config


class AccessLevel(str, enum.Enum):
    PUBLIC = "public"
    AUTHENTICATED = "authenticated"
    ADMIN = "admin"


@dataclass(frozen=True)
class Caller:
    identity_id: str
    user_name: str
    roles: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_admin(self) -> bool:
        return ADMIN_ROLE in self.roles


class Unauthenticated(Exception):
    pass


class Forbidden(Exception):
    pass


def check_access(caller: Optional[Caller], level: AccessLevel) -> None:
    if level == AccessLevel.PUBLIC:
        return
    if caller is None:
        raise Unauthenticated("authentication required")
    if level == AccessLevel.ADMIN and not caller.is_admin:
        raise Forbidden(f"role '{ADMIN_ROLE}' required")


_basic = HTTPBasic(auto_error=False)


def get_caller(
    credentials: Optional[HTTPBasicCredentials] = Depends(_basic),
    identity: IdentityStore = Depends(get_identity_store),
) -> Optional[Caller]:
    if credentials is None:
        return None
    identity_id = identity.verify_credentials(credentials.username, credentials.password)
    if identity_id is None:
        return None
    account = identity.get_account(identity_id)
    if account is None:
        return None
    return Caller(
        identity_id=identity_id,
        user_name=account.user_name,
        roles=tuple(identity.list_roles_for(identity_id)),
    )


def enforce(caller: Optional[Caller], level: AccessLevel) -> Optional[Caller]:
    try:
        check_access(caller, level)
    except Unauthenticated as e:
        raise HTTPException(status_code=401, detail=str(e), headers={"WWW-Authenticate": "Basic"})
    except Forbidden as e:
        raise HTTPException(status_code=403, detail=str(e))
    return caller


def require_authenticated(caller: Optional[Caller] = Depends(get_caller)) -> Caller:
    return enforce(caller, AccessLevel.AUTHENTICATED)


def require_admin(caller: Optional[Caller] = Depends(get_caller)) -> Caller:
    return enforce(caller, AccessLevel.ADMIN)


def require_configured(key: str):
    """Dependency whose access level is read from the config table at request time."""

    def dependency(
        caller: Optional[Caller] = Depends(get_caller),
        conn: sqlite3.Connection = Depends(get_db),
    ) -> Optional[Caller]:
        level = AccessLevel(get_config(conn)[key])
        return enforce(caller, level)

    return dependency
