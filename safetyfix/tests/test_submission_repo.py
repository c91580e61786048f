"""
Submission 仓储层测试
"""
from __future__ import annotations

from safetyfix.db import get_conn
from safetyfix.domain.submission import StatusUpdate, SubmissionFields
from safetyfix.repository import submission_repo


def _insert_at(conn, shop: str, submitted_at: str) -> int:
    cur = conn.execute(
        "INSERT INTO submissions (shopName, submittedAt) VALUES (?, ?)", (shop, submitted_at)
    )
    return int(cur.lastrowid)


def test_ensure_schema_is_idempotent_and_keeps_rows():
    with get_conn() as conn:
        sid = submission_repo.insert(conn, SubmissionFields(shopName="Keep Me"))
        submission_repo.ensure_schema(conn)
        submission_repo.ensure_schema(conn)
        assert submission_repo.get_one(conn, sid)["shopName"] == "Keep Me"


def test_insert_ids_strictly_increase_and_defaults():
    with get_conn() as conn:
        ids = [submission_repo.insert(conn, SubmissionFields(shopName=f"Shop {i}")) for i in range(3)]
        assert ids == sorted(ids) and len(set(ids)) == 3

        row = submission_repo.get_one(conn, ids[0])
        assert row["shopName"] == "Shop 0"
        assert row["isDone"] == 0 and row["isPrinted"] == 0
        assert row["submittedAt"] is not None
        assert row["doneAt"] is None and row["printedAt"] is None
        assert row["moduleCount"] is None

        count = conn.execute("SELECT COUNT(1) AS c FROM submissions WHERE id=?", (ids[1],)).fetchone()["c"]
        assert count == 1


def test_list_hides_done_by_default_and_orders_desc():
    with get_conn() as conn:
        a = _insert_at(conn, "A", "2024-01-01 08:00:00")
        b = _insert_at(conn, "B", "2024-01-03 08:00:00")
        c = _insert_at(conn, "C", "2024-01-02 08:00:00")
        conn.execute("UPDATE submissions SET isDone=1 WHERE id=?", (c,))

        open_rows = submission_repo.list_all(conn)
        assert [r["id"] for r in open_rows] == [b, a]
        assert all(r["isDone"] == 0 for r in open_rows)

        all_rows = submission_repo.list_all(conn, include_completed=True)
        assert [r["id"] for r in all_rows] == [b, c, a]


def test_list_ties_fall_back_to_newest_id():
    with get_conn() as conn:
        first = _insert_at(conn, "first", "2024-01-01 08:00:00")
        second = _insert_at(conn, "second", "2024-01-01 08:00:00")
        rows = submission_repo.list_all(conn)
        assert [r["id"] for r in rows] == [second, first]


def test_update_status_mirrors_timestamps():
    with get_conn() as conn:
        sid = submission_repo.insert(conn, SubmissionFields())

        assert submission_repo.update_status(conn, sid, StatusUpdate(now="T1").set_flag("isDone", True)) == 1
        row = submission_repo.get_one(conn, sid)
        assert row["isDone"] == 1 and row["doneAt"] == "T1"

        # re-setting true refreshes the timestamp
        submission_repo.update_status(conn, sid, StatusUpdate(now="T2").set_flag("isDone", True))
        assert submission_repo.get_one(conn, sid)["doneAt"] == "T2"

        submission_repo.update_status(conn, sid, StatusUpdate().set_flag("isDone", False))
        row = submission_repo.get_one(conn, sid)
        assert row["isDone"] == 0 and row["doneAt"] is None

        submission_repo.update_status(conn, sid, StatusUpdate(now="T3").set_flag("isPrinted", True))
        row = submission_repo.get_one(conn, sid)
        assert row["isPrinted"] == 1 and row["printedAt"] == "T3"
        assert row["doneAt"] is None

        submission_repo.update_status(conn, sid, StatusUpdate().set_flag("isPrinted", False))
        row = submission_repo.get_one(conn, sid)
        assert row["isPrinted"] == 0 and row["printedAt"] is None


def test_update_status_unknown_id_matches_nothing():
    with get_conn() as conn:
        sid = submission_repo.insert(conn, SubmissionFields())
        changed = submission_repo.update_status(conn, sid + 1000, StatusUpdate().set_flag("isDone", True))
        assert changed == 0
        assert conn.execute("SELECT COUNT(1) AS c FROM submissions WHERE isDone=1").fetchone()["c"] == 0
