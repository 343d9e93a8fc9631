#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HouseRules management commands (SQLite)

Commands:
  init                Create the schema and default settings; seed an empty database
  add-user            Register an account with its profile (optionally as Admin)

Notes:
- The database path comes from HOUSERULES_DB_PATH or config.yaml (db_path).
- The seeded administrator's password comes from HOUSERULES_ADMIN_PASSWORD or
  config.yaml (admin_password); `init --admin-password` overrides both.
"""

import argparse
import getpass

from houserules.db import get_conn, get_db_path, ensure_schema
from houserules.identity import ADMIN_ROLE, SqliteIdentityStore
from houserules.repository import identity_repo
from houserules.logs import LogContext, ensure_log_schema
from houserules.services.config_svc import ensure_default_config
from houserules.services.errors import ServiceError
from houserules.services.seed_svc import seed_once
from houserules.services.userprofile_svc import register


# ---------------- Commands ----------------

def cmd_init(args):
    with get_conn() as conn:
        ensure_schema(conn)
        ensure_default_config(conn)
        try:
            res = seed_once(conn, args.admin_password)
        except ValueError as e:
            raise SystemExit(str(e))
    ensure_log_schema()
    if res is None:
        print({"message": "already initialized", "db": get_db_path()})
    else:
        print({"message": "ok", "db": get_db_path(), **res})


def cmd_add_user(args):
    password = args.password or getpass.getpass("Password: ")
    data = {
        "user_name": args.user_name,
        "email": args.email,
        "password": password,
        "first_name": args.first_name,
        "last_name": args.last_name,
        "address": args.address,
    }
    log = LogContext("REGISTER", "cli")
    with get_conn() as conn:
        identity = SqliteIdentityStore(conn)
        if args.admin and identity_repo.get_role_by_name(conn, ADMIN_ROLE) is None:
            raise SystemExit("admin_role_not_found: run `init` first")
        try:
            profile = register(conn, identity, data, log)
        except ServiceError as e:
            log.write("ERROR", e.detail)
            raise SystemExit(e.detail)
        if args.admin and not identity.add_role(profile["identity_user_id"], ADMIN_ROLE):
            log.write("ERROR", "admin_role_not_found")
            raise SystemExit("admin_role_not_found")
    log.write("OK")
    print({"message": "ok", "profile_id": profile["id"], "identity_user_id": profile["identity_user_id"]})


# ---------------- Entry ----------------

def main():
    parser = argparse.ArgumentParser(description="HouseRules chore tracker (SQLite)")
    sub = parser.add_subparsers()

    p_init = sub.add_parser("init", help="init db, default settings and seed data")
    p_init.add_argument("--admin-password", required=False)
    p_init.set_defaults(func=cmd_init)

    p_add = sub.add_parser("add-user", help="register a user account and profile")
    p_add.add_argument("--user-name", required=True)
    p_add.add_argument("--email", required=True)
    p_add.add_argument("--password", required=False, help="prompted when omitted")
    p_add.add_argument("--first-name", required=True)
    p_add.add_argument("--last-name", required=True)
    p_add.add_argument("--address", required=True)
    p_add.add_argument("--admin", action="store_true", help="grant the Admin role")
    p_add.set_defaults(func=cmd_add_user)

    args = parser.parse_args()
    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
