"""
FastAPI app entry point aggregating per-domain routers under houserules/routes.
Run with `uvicorn houserules.api:app`.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .db import get_conn, ensure_schema, get_admin_password, get_cors_origins
from .logs import ensure_log_schema
from .routes.base import APP_NAME, APP_VERSION
from .services.config_svc import ensure_default_config
from .services.seed_svc import seed_once

logger = logging.getLogger(__name__)

app = FastAPI(title=APP_NAME, version=APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def init_db():
    """Create missing tables and settings; seed data only lands in an empty database."""
    with get_conn() as conn:
        ensure_schema(conn)
        ensure_default_config(conn)
        if get_admin_password():
            seed_once(conn)
        else:
            logger.warning("admin password not configured; skipping seed data")
    ensure_log_schema()


@app.on_event("startup")
def on_startup():
    init_db()


# Include routers (split by resource)
from .routes import base as base_routes
from .routes import account as account_routes
from .routes import userprofile as userprofile_routes
from .routes import chore as chore_routes
from .routes import settings as settings_routes
from .routes import logs as logs_routes

app.include_router(base_routes.router)
app.include_router(account_routes.router)
app.include_router(userprofile_routes.router)
app.include_router(chore_routes.router)
app.include_router(settings_routes.router)
app.include_router(logs_routes.router)
