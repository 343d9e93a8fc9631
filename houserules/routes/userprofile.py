from __future__ import annotations

import logging
import sqlite3
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response

from ..auth import Caller, require_admin, require_authenticated, require_configured
from ..db import get_db
from ..identity import IdentityStore, get_identity_store
from ..logs import LogContext
from ..services.errors import NotFound, ServiceError
from ..services.userprofile_svc import (
    list_profiles, list_profiles_with_roles, get_profile_with_chores, promote, demote,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/api/userprofile")
def api_userprofile_list(
    caller: Caller = Depends(require_admin),
    conn: sqlite3.Connection = Depends(get_db),
):
    return list_profiles(conn)


@router.get("/api/userprofile/withroles")
def api_userprofile_with_roles(
    caller: Optional[Caller] = Depends(require_configured("withroles_access")),
    conn: sqlite3.Connection = Depends(get_db),
):
    return list_profiles_with_roles(conn)


def _change_role(action: str, fn, identity_id: str, caller: Caller, conn, identity: IdentityStore):
    log = LogContext(action, caller.user_name)
    log.set_payload({"identity_user_id": identity_id})
    try:
        fn(conn, identity, identity_id, log)
    except ServiceError as e:
        log.write("ERROR", e.detail)
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    except Exception:
        logger.exception("%s failed for %s", action, identity_id)
        log.write("ERROR", "internal error")
        raise HTTPException(status_code=500, detail="internal error")
    log.write("OK")
    return Response(status_code=204)


@router.post("/api/userprofile/promote/{identity_id}", status_code=204)
def api_userprofile_promote(
    identity_id: str,
    caller: Caller = Depends(require_admin),
    conn: sqlite3.Connection = Depends(get_db),
    identity: IdentityStore = Depends(get_identity_store),
):
    return _change_role("PROMOTE_USER", promote, identity_id, caller, conn, identity)


@router.post("/api/userprofile/demote/{identity_id}", status_code=204)
def api_userprofile_demote(
    identity_id: str,
    caller: Caller = Depends(require_admin),
    conn: sqlite3.Connection = Depends(get_db),
    identity: IdentityStore = Depends(get_identity_store),
):
    return _change_role("DEMOTE_USER", demote, identity_id, caller, conn, identity)


@router.get("/api/userprofile/{profile_id}")
def api_userprofile_get(
    profile_id: int,
    caller: Caller = Depends(require_authenticated),
    conn: sqlite3.Connection = Depends(get_db),
):
    try:
        return get_profile_with_chores(conn, profile_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.detail)
