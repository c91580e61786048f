"""HTTP Basic access gate for the dashboard and its JSON endpoints."""
from __future__ import annotations

import binascii
import secrets
from base64 import b64decode
from functools import lru_cache
from typing import Mapping, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBasicCredentials
from fastapi.security.utils import get_authorization_scheme_param

from .errors import AuthError
from .settings import load_settings


class BasicAuthGate:
    """Checks Basic credentials against a static username -> password mapping."""

    def __init__(self, users: Mapping[str, str], realm: str = "SafetyFix"):
        self._users = dict(users)
        self.realm = realm

    def parse_header(self, authorization: Optional[str]) -> Optional[HTTPBasicCredentials]:
        """Decode an ``Authorization: Basic`` header as UTF-8; None when absent or not Basic."""
        scheme, param = get_authorization_scheme_param(authorization)
        if not authorization or scheme.lower() != "basic":
            return None
        try:
            data = b64decode(param, validate=True).decode("utf-8")
        except (ValueError, UnicodeDecodeError, binascii.Error) as e:
            raise AuthError(f"malformed Basic credentials: {e}", realm=self.realm) from e
        username, sep, password = data.partition(":")
        if not sep:
            raise AuthError("malformed Basic credentials: missing ':'", realm=self.realm)
        return HTTPBasicCredentials(username=username, password=password)

    def check(self, credentials: Optional[HTTPBasicCredentials]) -> str:
        if credentials is None:
            raise AuthError("no credentials provided", realm=self.realm)
        expected = self._users.get(credentials.username)
        # 用户不存在时也做一次比较，避免时间差泄露
        candidate = expected if expected is not None else ""
        ok = secrets.compare_digest(credentials.password.encode("utf-8"), candidate.encode("utf-8"))
        if expected is None or not ok:
            raise AuthError(f"credentials for {credentials.username!r} rejected", realm=self.realm)
        return credentials.username


@lru_cache()
def get_auth_gate() -> BasicAuthGate:
    settings = load_settings()
    return BasicAuthGate(settings.auth_users, realm=settings.auth_realm)


def require_user(request: Request, gate: BasicAuthGate = Depends(get_auth_gate)) -> str:
    credentials = gate.parse_header(request.headers.get("Authorization"))
    return gate.check(credentials)
