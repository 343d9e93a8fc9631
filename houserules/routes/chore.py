from __future__ import annotations

import logging
import sqlite3
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, ConfigDict, Field

from ..auth import Caller, require_admin, require_authenticated, require_configured
from ..db import get_db
from ..logs import LogContext
from ..services.errors import NotFound, ServiceError
from ..services.chore_svc import (
    list_chores, get_chore_with_completions, create_chore, update_chore, delete_chore,
)
from ..services.assignment_svc import complete_chore, assign_chore, unassign_chore

router = APIRouter()
logger = logging.getLogger(__name__)


class ChoreBody(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[int] = None  # only checked against the path id on update
    name: str = Field(..., min_length=1, max_length=200)
    difficulty: int = Field(..., ge=1, le=5)
    recurrence_days: int = Field(..., ge=1)


def _fail(log: LogContext, e: Exception):
    if isinstance(e, ServiceError):
        log.write("ERROR", e.detail)
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    logger.exception("%s failed", log.action)
    log.write("ERROR", "internal error")
    raise HTTPException(status_code=500, detail="internal error")


@router.get("/api/chore")
def api_chore_list(
    caller: Caller = Depends(require_authenticated),
    conn: sqlite3.Connection = Depends(get_db),
):
    return list_chores(conn)


@router.get("/api/chore/{chore_id}")
def api_chore_get(
    chore_id: int,
    caller: Caller = Depends(require_authenticated),
    conn: sqlite3.Connection = Depends(get_db),
):
    try:
        return get_chore_with_completions(conn, chore_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.detail)


@router.post("/api/chore/{chore_id}/complete", status_code=204)
def api_chore_complete(
    chore_id: int,
    user_id: int = Query(..., alias="userId"),
    caller: Caller = Depends(require_authenticated),
    conn: sqlite3.Connection = Depends(get_db),
):
    log = LogContext("COMPLETE_CHORE", caller.user_name)
    log.set_payload({"chore_id": chore_id, "user_profile_id": user_id})
    try:
        complete_chore(conn, chore_id, user_id, log)
    except Exception as e:
        _fail(log, e)
    log.write("OK")
    return Response(status_code=204)


@router.post("/api/chore", status_code=201)
def api_chore_create(
    body: ChoreBody,
    response: Response,
    caller: Caller = Depends(require_admin),
    conn: sqlite3.Connection = Depends(get_db),
):
    log = LogContext("CREATE_CHORE", caller.user_name)
    log.set_payload(body.model_dump(exclude={"id"}))
    try:
        created = create_chore(conn, body.model_dump(exclude={"id"}), log)
    except Exception as e:
        _fail(log, e)
    log.write("OK")
    response.headers["Location"] = f"/api/chore/{created['id']}"
    return created


@router.put("/api/chore/{chore_id}", status_code=204)
def api_chore_update(
    chore_id: int,
    body: ChoreBody,
    caller: Caller = Depends(require_admin),
    conn: sqlite3.Connection = Depends(get_db),
):
    log = LogContext("UPDATE_CHORE", caller.user_name)
    log.set_payload(body.model_dump())
    try:
        update_chore(conn, chore_id, body.model_dump(), log)
    except Exception as e:
        _fail(log, e)
    log.write("OK")
    return Response(status_code=204)


@router.delete("/api/chore/{chore_id}", status_code=204)
def api_chore_delete(
    chore_id: int,
    caller: Caller = Depends(require_admin),
    conn: sqlite3.Connection = Depends(get_db),
):
    log = LogContext("DELETE_CHORE", caller.user_name)
    try:
        delete_chore(conn, chore_id, log)
    except Exception as e:
        _fail(log, e)
    log.write("OK")
    return Response(status_code=204)


@router.post("/api/chore/{chore_id}/assign", status_code=204)
def api_chore_assign(
    chore_id: int,
    user_id: int = Query(..., alias="userId"),
    caller: Caller = Depends(require_configured("assign_access")),
    conn: sqlite3.Connection = Depends(get_db),
):
    log = LogContext("ASSIGN_CHORE", caller.user_name if caller else "anonymous")
    log.set_payload({"chore_id": chore_id, "user_profile_id": user_id})
    try:
        inserted = assign_chore(conn, chore_id, user_id, log)
    except Exception as e:
        _fail(log, e)
    log.write("OK" if inserted else "NOOP")
    return Response(status_code=204)


@router.post("/api/chore/{chore_id}/unassign", status_code=204)
def api_chore_unassign(
    chore_id: int,
    user_id: int = Query(..., alias="userId"),
    caller: Caller = Depends(require_authenticated),
    conn: sqlite3.Connection = Depends(get_db),
):
    log = LogContext("UNASSIGN_CHORE", caller.user_name)
    log.set_payload({"chore_id": chore_id, "user_profile_id": user_id})
    try:
        unassign_chore(conn, chore_id, user_id, log)
    except Exception as e:
        _fail(log, e)
    log.write("OK")
    return Response(status_code=204)
