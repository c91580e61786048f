from __future__ import annotations

from sqlite3 import Connection, Row

from ..domain.submission import SUBMISSION_COLUMNS, StatusUpdate, SubmissionFields

DDL = """
CREATE TABLE IF NOT EXISTS submissions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    shopName TEXT,
    phoneNumber TEXT,
    dropOffType TEXT,
    vehicleYear INTEGER,
    vehicleMake TEXT,
    vehicleModel TEXT,
    vehicleIssueDescription TEXT,
    moduleCount INTEGER,
    singleStageCount INTEGER,
    dualStageCount INTEGER,
    threeStageCount INTEGER,
    buckleCount INTEGER,
    isDone BOOLEAN NOT NULL DEFAULT 0,
    isPrinted BOOLEAN NOT NULL DEFAULT 0,
    submittedAt TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    doneAt TIMESTAMP,
    printedAt TIMESTAMP
)
"""


def ensure_schema(conn: Connection):
    conn.execute(DDL)


def insert(conn: Connection, data: SubmissionFields) -> int:
    cols = ", ".join(SUBMISSION_COLUMNS)
    placeholders = ", ".join(["?"] * len(SUBMISSION_COLUMNS))
    cur = conn.execute(
        f"INSERT INTO submissions ({cols}) VALUES ({placeholders})",
        data.values(),
    )
    return int(cur.lastrowid)


def list_all(conn: Connection, include_completed: bool = False) -> list[Row]:
    sql = "SELECT * FROM submissions"
    if not include_completed:
        sql += " WHERE isDone = 0"
    sql += " ORDER BY submittedAt DESC, id DESC"
    return conn.execute(sql).fetchall()


def get_one(conn: Connection, submission_id: int) -> Row | None:
    return conn.execute("SELECT * FROM submissions WHERE id = ?", (submission_id,)).fetchone()


def update_status(conn: Connection, submission_id: int, update: StatusUpdate) -> int:
    """Apply a status update, returning the number of rows matched (0 or 1)."""
    sql, params = update.build(submission_id)
    cur = conn.execute(sql, params)
    return int(cur.rowcount)
