from __future__ import annotations

import logging
import sqlite3

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, ConfigDict, Field

from ..auth import Caller, require_authenticated
from ..db import get_db
from ..identity import IdentityStore, get_identity_store
from ..logs import LogContext
from ..services.errors import NotFound, ServiceError
from ..services.userprofile_svc import register, get_profile_for_identity

router = APIRouter()
logger = logging.getLogger(__name__)


class RegistrationBody(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    user_name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=6)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)


@router.post("/api/auth/register", status_code=201)
def api_register(
    body: RegistrationBody,
    response: Response,
    conn: sqlite3.Connection = Depends(get_db),
    identity: IdentityStore = Depends(get_identity_store),
):
    log = LogContext("REGISTER", body.user_name)
    log.set_payload(body.model_dump(exclude={"password"}))
    try:
        profile = register(conn, identity, body.model_dump(), log)
    except ServiceError as e:
        log.write("ERROR", e.detail)
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    except Exception:
        logger.exception("registration failed for %s", body.user_name)
        log.write("ERROR", "internal error")
        raise HTTPException(status_code=500, detail="internal error")
    log.write("OK")
    response.headers["Location"] = f"/api/userprofile/{profile['id']}"
    return profile


@router.get("/api/auth/me")
def api_me(
    caller: Caller = Depends(require_authenticated),
    conn: sqlite3.Connection = Depends(get_db),
    identity: IdentityStore = Depends(get_identity_store),
):
    try:
        return get_profile_for_identity(conn, identity, caller.identity_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.detail)
