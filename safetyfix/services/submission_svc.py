from __future__ import annotations

import logging
import sqlite3
from typing import Any

from ..db import get_conn
from ..domain.submission import StatusUpdate, SubmissionFields, row_to_dict
from ..errors import StorageError, ValidationError
from ..logs import LogContext
from ..repository import submission_repo

logger = logging.getLogger(__name__)


def ensure_submission_schema():
    with get_conn() as conn:
        submission_repo.ensure_schema(conn)


def create_submission(data: SubmissionFields, log: LogContext | None = None) -> int:
    try:
        with get_conn() as conn:
            new_id = submission_repo.insert(conn, data)
    except sqlite3.Error as e:
        raise StorageError(f"insert failed: {e}", public_message="Failed to submit form.") from e
    if log:
        log.set_entity("SUBMISSION", new_id)
    logger.info("A new submission has been added with ID: %s", new_id)
    return new_id


def list_submissions(include_completed: bool = False) -> list[dict[str, Any]]:
    try:
        with get_conn() as conn:
            rows = submission_repo.list_all(conn, include_completed)
    except sqlite3.Error as e:
        raise StorageError(f"select failed: {e}", public_message="Could not retrieve submissions.") from e
    return [row_to_dict(r) for r in rows]


def get_submission(submission_id: int) -> dict[str, Any] | None:
    try:
        with get_conn() as conn:
            row = submission_repo.get_one(conn, submission_id)
    except sqlite3.Error as e:
        raise StorageError(f"select failed: {e}", public_message="Could not retrieve submissions.") from e
    return row_to_dict(row) if row else None


def update_submission_status(
    submission_id: int,
    is_done: bool | None = None,
    is_printed: bool | None = None,
    log: LogContext | None = None,
) -> int:
    """
    Set isDone / isPrinted (and their timestamps) on one submission.

    Returns the number of rows matched; 0 means the id does not exist.
    Raises ValidationError when neither flag is given, before any DB access.
    """
    update = StatusUpdate().set_flag("isDone", is_done).set_flag("isPrinted", is_printed)
    if update.is_empty():
        raise ValidationError("no fields to update")

    if log:
        log.set_entity("SUBMISSION", submission_id)
    try:
        with get_conn() as conn:
            before = submission_repo.get_one(conn, submission_id)
            changed = submission_repo.update_status(conn, submission_id, update)
            after = submission_repo.get_one(conn, submission_id) if changed else None
    except sqlite3.Error as e:
        raise StorageError(
            f"update failed for ID {submission_id}: {e}", public_message="Failed to update status."
        ) from e
    if log:
        log.set_before(row_to_dict(before) if before else None)
        log.set_after(row_to_dict(after) if after else None)
    if changed:
        logger.info("Status for submission ID %s updated.", submission_id)
    return changed
