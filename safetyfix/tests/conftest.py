import base64
import os
import sys
import sqlite3
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

TEST_USERS = {"frontdesk": "s3cret"}


def basic_auth(user: str, password: str) -> dict:
    token = base64.b64encode(f"{user}:{password}".encode("utf-8")).decode("ascii")
    return {"Authorization": f"Basic {token}"}


@pytest.fixture(scope="session")
def tmp_db_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("db") / "safetyfixs_test.db"
    # Point the app to this temp DB
    os.environ["SAFETYFIX_DB_PATH"] = str(path)
    from safetyfix.logs import ensure_log_schema
    from safetyfix.services.submission_svc import ensure_submission_schema
    ensure_submission_schema()
    ensure_log_schema()
    return str(path)


@pytest.fixture()
def gate():
    from safetyfix.auth import BasicAuthGate
    return BasicAuthGate(TEST_USERS)


@pytest.fixture()
def client(tmp_db_path, gate):
    # Import app after DB ready so startup hooks can use it
    from safetyfix.api import app
    from safetyfix.auth import get_auth_gate
    from fastapi.testclient import TestClient
    app.dependency_overrides[get_auth_gate] = lambda: gate
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers():
    user, password = next(iter(TEST_USERS.items()))
    return basic_auth(user, password)


@pytest.fixture(autouse=True)
def _clean_db(tmp_db_path):
    # Clean tables before each test for isolation
    # Safety: ensure we only ever wipe the temp DB, never a real one
    assert os.environ.get("SAFETYFIX_DB_PATH") == tmp_db_path, "Refusing to clean non-temp DB"
    conn = sqlite3.connect(tmp_db_path)
    try:
        for t in ("submissions", "operation_log"):
            conn.execute(f"DELETE FROM {t}")
        conn.commit()
    finally:
        conn.close()
    yield
