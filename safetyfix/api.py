"""
FastAPI app entry point aggregating the intake and dashboard routers under safetyfix/routes.
Keep as `uvicorn safetyfix.api:app`.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .db import get_conn
from .errors import AppError
from .logs import ensure_log_schema
from .services.submission_svc import ensure_submission_schema
from .settings import APP_NAME, APP_VERSION

logger = logging.getLogger(__name__)

app = FastAPI(title=APP_NAME, version=APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc)
    else:
        logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message}, headers=exc.headers)


@app.on_event("startup")
def on_startup():
    try:
        with get_conn() as conn:
            conn.execute("SELECT 1")
        logger.info("Connected to the SQLite database.")
    except Exception as e:
        logger.error("Error opening database: %s", e)
    try:
        ensure_submission_schema()
        logger.info("Submissions table is ready.")
    except Exception as e:
        logger.error("Error creating/updating table: %s", e)
    try:
        ensure_log_schema()
    except Exception as e:
        logger.error("ensure_log_schema_failed: %s", e)


from .routes import base as base_routes
from .routes import dashboard as dashboard_routes
from .routes import submissions as submissions_routes
from .routes import logs as logs_routes

app.include_router(base_routes.router)
app.include_router(dashboard_routes.router)
app.include_router(submissions_routes.router)
app.include_router(logs_routes.router)
