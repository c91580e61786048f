from __future__ import annotations

# safetyfix/settings.py
import os
from dataclasses import dataclass, field
from typing import Any

import yaml

# 配置来源（后者覆盖前者）：
# 1) 内置默认值
# 2) 项目根 config.yaml（或 SAFETYFIX_CONFIG 指定的文件）
# 3) 环境变量 PORT / SAFETYFIX_AUTH_USERS
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

DEFAULT_PORT = 3000
DEFAULT_USERS = {"admin": "password"}
APP_NAME = "safetyfix-intake-api"
APP_VERSION = "0.1.0"


def read_config_yaml() -> dict[str, Any]:
    cfg_path = os.environ.get("SAFETYFIX_CONFIG") or os.path.join(PROJECT_ROOT, "config.yaml")
    if not os.path.exists(cfg_path):
        return {}
    with open(cfg_path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"config file {cfg_path} must contain a mapping")
    return cfg


def parse_users(raw: str) -> dict[str, str]:
    """Parse ``user:pass[,user:pass]`` into a mapping. Blank entries are skipped."""
    users: dict[str, str] = {}
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        name, sep, password = item.partition(":")
        if not sep or not name:
            raise ValueError(f"invalid credential entry: {item!r}")
        users[name] = password
    return users


@dataclass(frozen=True)
class Settings:
    port: int = DEFAULT_PORT
    auth_users: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_USERS))
    auth_realm: str = "SafetyFix"


def load_settings() -> Settings:
    cfg = read_config_yaml()

    port = int(os.environ.get("PORT") or cfg.get("port") or DEFAULT_PORT)

    env_users = os.environ.get("SAFETYFIX_AUTH_USERS")
    if env_users:
        users = parse_users(env_users)
    elif isinstance(cfg.get("auth_users"), dict) and cfg["auth_users"]:
        users = {str(k): str(v) for k, v in cfg["auth_users"].items()}
    else:
        users = dict(DEFAULT_USERS)

    return Settings(port=port, auth_users=users)
