from __future__ import annotations

import pytest

from safetyfix import settings
from safetyfix.auth import BasicAuthGate
from safetyfix.db import get_db_path
from safetyfix.errors import AuthError


def test_parse_users():
    assert settings.parse_users("a:1, b:two:parts ,") == {"a": "1", "b": "two:parts"}
    with pytest.raises(ValueError):
        settings.parse_users("no-colon")


def test_load_settings_defaults(monkeypatch, tmp_path):
    monkeypatch.setenv("SAFETYFIX_CONFIG", str(tmp_path / "missing.yaml"))
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.delenv("SAFETYFIX_AUTH_USERS", raising=False)
    s = settings.load_settings()
    assert s.port == 3000
    assert s.auth_users == {"admin": "password"}


def test_load_settings_from_yaml_and_env(monkeypatch, tmp_path):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("port: 8080\nauth_users:\n  boss: hunter2\n", encoding="utf-8")
    monkeypatch.setenv("SAFETYFIX_CONFIG", str(cfg))
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.delenv("SAFETYFIX_AUTH_USERS", raising=False)
    s = settings.load_settings()
    assert s.port == 8080
    assert s.auth_users == {"boss": "hunter2"}

    monkeypatch.setenv("PORT", "5000")
    monkeypatch.setenv("SAFETYFIX_AUTH_USERS", "x:y")
    s = settings.load_settings()
    assert s.port == 5000
    assert s.auth_users == {"x": "y"}


def test_db_path_env_wins(monkeypatch, tmp_path):
    target = tmp_path / "nested" / "app.db"
    monkeypatch.setenv("SAFETYFIX_DB_PATH", str(target))
    assert get_db_path() == str(target)
    assert target.parent.is_dir()


def test_gate_holds_many_users():
    from fastapi.security import HTTPBasicCredentials

    gate = BasicAuthGate({"a": "1", "b": "2"}, realm="Shop")
    assert gate.check(HTTPBasicCredentials(username="b", password="2")) == "b"
    with pytest.raises(AuthError) as ei:
        gate.check(HTTPBasicCredentials(username="a", password="2"))
    assert ei.value.headers == {"WWW-Authenticate": 'Basic realm="Shop"'}
    with pytest.raises(AuthError):
        gate.check(None)
