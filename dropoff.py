#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
SafetyFix drop-off intake (SQLite + FastAPI)

Commands:
  init                Create the submissions and operation_log tables if missing
  serve               Run the HTTP API and dashboard with uvicorn
  report              Print submissions and export them as CSV

Notes:
- The DB path comes from SAFETYFIX_DB_PATH or config.yaml (db_path), default ./safetyfixs.db.
- The listen port comes from PORT or config.yaml (port), default 3000.
"""

import argparse
import datetime as dt
import logging
import os

import pandas as pd

from safetyfix.db import get_conn, get_db_path
from safetyfix.logs import ensure_log_schema
from safetyfix.services.submission_svc import ensure_submission_schema
from safetyfix.settings import load_settings


# ---------------- Commands ----------------

def cmd_init(args):
    ensure_submission_schema()
    ensure_log_schema()
    print("DB initialized:", get_db_path())


def cmd_serve(args):
    import uvicorn

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    port = args.port or load_settings().port
    print(f"Server is running on http://localhost:{port}")
    uvicorn.run("safetyfix.api:app", host=args.host, port=port)


def cmd_report(args):
    sql = "SELECT * FROM submissions"
    if not args.all:
        sql += " WHERE isDone = 0"
    sql += " ORDER BY submittedAt DESC, id DESC"

    with get_conn() as conn:
        df = pd.read_sql_query(sql, conn)

    pd.set_option("display.max_rows", 200)
    pd.set_option("display.width", 160)

    print("\n=== Submissions ===")
    if not df.empty:
        print(df[["id", "shopName", "vehicleYear", "vehicleMake", "vehicleModel", "isDone", "isPrinted", "submittedAt"]])
    else:
        print("(empty)")

    out_dir = args.out or os.path.join(os.path.dirname(os.path.abspath(__file__)), "exports")
    os.makedirs(out_dir, exist_ok=True)
    stamp = dt.datetime.now().strftime("%Y%m%d")
    out_path = os.path.join(out_dir, f"submissions_{stamp}.csv")
    df.to_csv(out_path, index=False, encoding="utf-8-sig")
    print("\nCSV exported to", out_path)


# ---------------- Entry ----------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SafetyFix drop-off intake (SQLite + FastAPI)")
    sub = parser.add_subparsers()

    p_init = sub.add_parser("init", help="create tables")
    p_init.set_defaults(func=cmd_init)

    p_serve = sub.add_parser("serve", help="run the API server")
    p_serve.add_argument("--host", default="0.0.0.0")
    p_serve.add_argument("--port", type=int, required=False, help="default: PORT / config.yaml / 3000")
    p_serve.add_argument("--debug", action="store_true")
    p_serve.set_defaults(func=cmd_serve)

    p_rep = sub.add_parser("report", help="print and export submissions")
    p_rep.add_argument("--all", action="store_true", help="include completed submissions")
    p_rep.add_argument("--out", required=False, help="export directory (default ./exports)")
    p_rep.set_defaults(func=cmd_report)
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
