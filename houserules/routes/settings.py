from __future__ import annotations

import sqlite3

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..auth import Caller, require_admin
from ..db import get_db
from ..logs import LogContext
from ..services.config_svc import get_config, update_config
from ..services.errors import ServiceError

router = APIRouter()


@router.get("/api/settings/get")
def api_settings_get(
    caller: Caller = Depends(require_admin),
    conn: sqlite3.Connection = Depends(get_db),
):
    return get_config(conn)


class SettingsUpdateBody(BaseModel):
    updates: dict[str, str]


@router.post("/api/settings/update")
def api_settings_update(
    body: SettingsUpdateBody,
    caller: Caller = Depends(require_admin),
    conn: sqlite3.Connection = Depends(get_db),
):
    log = LogContext("SETTINGS_UPDATE", caller.user_name)
    log.set_payload(body.model_dump())
    try:
        updated_keys = update_config(conn, body.updates, log)
        log.write("OK")
        return {"message": "ok", "updated": updated_keys}
    except ServiceError as e:
        log.write("ERROR", e.detail)
        raise HTTPException(status_code=e.status_code, detail=e.detail)
