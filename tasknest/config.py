from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

QUOTE_MODES = ("random", "fixed")


def _resolve_project_root() -> Path:
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]


PROJECT_ROOT = _resolve_project_root()


def load_env() -> None:
    """Read ``.env`` and then ``.env.{APP_ENV}``, first match per name wins."""
    env_name = os.getenv("APP_ENV", "development")
    for name, override in ((".env", False), (f".env.{env_name}", True)):
        path = next(
            (base / name for base in (Path.cwd(), PROJECT_ROOT) if (base / name).exists()),
            None,
        )
        if path is not None:
            load_dotenv(path, override=override)


@dataclass(frozen=True)
class Settings:
    database_url: str
    log_level: str = "INFO"
    log_dir: str = "logs"
    quote_mode: str = "random"

    @property
    def log_path(self) -> Path:
        log_dir = Path(self.log_dir)
        if not log_dir.is_absolute():
            log_dir = PROJECT_ROOT / log_dir
        return log_dir / "tasknest.log"


def default_database_url() -> str:
    return f"sqlite:///{(PROJECT_ROOT / 'tasknest.sqlite3').as_posix()}"


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build settings from ``environ``; unusable values fall back to defaults."""
    environ = os.environ if environ is None else environ

    log_level = environ.get("LOG_LEVEL", "INFO").strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        log_level = "INFO"

    quote_mode = environ.get("QUOTE_MODE", "").strip().lower()
    if quote_mode not in QUOTE_MODES:
        quote_mode = "random"

    return Settings(
        database_url=environ.get("DATABASE_URL", "").strip() or default_database_url(),
        log_level=log_level,
        log_dir=environ.get("LOG_DIR", "").strip() or "logs",
        quote_mode=quote_mode,
    )


load_env()

SETTINGS = load_settings()
