"""
Configuration loader for the portfolio storage service.
Reads settings from an optional YAML file with environment variable
substitution, then applies environment overrides (DATABASE_URL, NODE_ENV, ...).
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml


@dataclass
class DatabaseConfig:
    url: str = ""                       # empty → memory mode; postgresql:// | sqlite://
    connect_timeout: float = 5.0        # seconds, bounds the startup connection test
    pool_size: int = 10
    max_overflow: int = 20
    echo: bool = False


@dataclass
class AdminSeedConfig:
    username: str = "admin"
    email: str = "admin@alqudimi.com"
    password: str = "admin123"


@dataclass
class AuthConfig:
    jwt_secret: str = "your-secret-key"
    algorithm: str = "HS256"
    token_expire_minutes: int = 60 * 24


@dataclass
class Settings:
    app_name: str = "Alqudimi Technology API"
    environment: str = "production"
    debug: bool = False
    port: int = 5000
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    admin: AdminSeedConfig = field(default_factory=AdminSeedConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


_settings: Optional[Settings] = None


def _substitute_env_vars(value: str) -> str:
    """Replace ${VAR_NAME} patterns with environment variable values."""
    pattern = re.compile(r'\$\{(\w+)\}')
    def replacer(match):
        var_name = match.group(1)
        return os.environ.get(var_name, match.group(0))
    return pattern.sub(replacer, value)


def _process_values(obj: Any) -> Any:
    """Recursively substitute env vars in all string values."""
    if isinstance(obj, str):
        return _substitute_env_vars(obj)
    elif isinstance(obj, dict):
        return {k: _process_values(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_process_values(v) for v in obj]
    return obj


def _apply_env_overrides(settings: Settings, env: dict[str, str]) -> None:
    if "DATABASE_URL" in env:
        settings.database.url = env["DATABASE_URL"]
    environment = env.get("APP_ENV") or env.get("NODE_ENV")
    if environment:
        settings.environment = environment
    if env.get("DB_CONNECT_TIMEOUT"):
        settings.database.connect_timeout = float(env["DB_CONNECT_TIMEOUT"])
    if env.get("ADMIN_USERNAME"):
        settings.admin.username = env["ADMIN_USERNAME"]
    if env.get("ADMIN_EMAIL"):
        settings.admin.email = env["ADMIN_EMAIL"]
    if env.get("ADMIN_PASSWORD"):
        settings.admin.password = env["ADMIN_PASSWORD"]
    if env.get("JWT_SECRET"):
        settings.auth.jwt_secret = env["JWT_SECRET"]
    if env.get("PORT"):
        settings.port = int(env["PORT"])


def load_settings(config_path: str = None, env: dict[str, str] = None) -> Settings:
    """Load settings from YAML file, then apply environment overrides."""
    global _settings

    env = dict(os.environ) if env is None else env

    if config_path is None:
        config_path = env.get(
            "PORTFOLIO_CONFIG",
            str(Path(__file__).parent / "settings.yaml"),
        )

    settings = Settings()

    if Path(config_path).exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}
        raw = _process_values(raw)

        settings.app_name = raw.get("app_name", settings.app_name)
        settings.environment = raw.get("environment", settings.environment)
        settings.debug = raw.get("debug", settings.debug)
        settings.port = int(raw.get("port", settings.port))

        if "database" in raw:
            db = raw["database"] or {}
            settings.database = DatabaseConfig(
                url=db.get("url", settings.database.url) or "",
                connect_timeout=float(db.get("connect_timeout", settings.database.connect_timeout)),
                pool_size=db.get("pool_size", settings.database.pool_size),
                max_overflow=db.get("max_overflow", settings.database.max_overflow),
                echo=db.get("echo", settings.database.echo),
            )

        if "admin" in raw:
            adm = raw["admin"] or {}
            settings.admin = AdminSeedConfig(
                username=adm.get("username", settings.admin.username),
                email=adm.get("email", settings.admin.email),
                password=adm.get("password", settings.admin.password),
            )

        if "auth" in raw:
            au = raw["auth"] or {}
            settings.auth = AuthConfig(
                jwt_secret=au.get("jwt_secret", settings.auth.jwt_secret),
                algorithm=au.get("algorithm", settings.auth.algorithm),
                token_expire_minutes=au.get("token_expire_minutes", settings.auth.token_expire_minutes),
            )

    _apply_env_overrides(settings, env)

    _settings = settings
    return settings


def get_settings() -> Settings:
    """Return cached settings or load from default path."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Drop cached settings (for testing)."""
    global _settings
    _settings = None
