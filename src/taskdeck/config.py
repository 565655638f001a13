# src/taskdeck/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole process, loaded once.
- CLI flags override these values; nothing here touches the taskfile itself.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import dotenv_values, find_dotenv

ENV_PREFIX = "TASKDECK"
DEFAULT_TASKFILE_NAME = "taskdeck.toml"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path | None) -> Path | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_dir: Path | None

    # ---- Taskfile ----
    taskfile: Path | None
    taskfile_name: str

    # ---- Execution ----
    dotenv_load: bool
    echo: bool

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            app_name=_env(_k("APP_NAME"), "taskdeck") or "taskdeck",
            log_level=_env(_k("LOG_LEVEL"), "WARNING").strip().upper() or "WARNING",
            log_dir=_env_path(_k("LOG_DIR"), None),
            taskfile=_env_path(_k("TASKFILE"), None),
            taskfile_name=_env(_k("TASKFILE_NAME"), DEFAULT_TASKFILE_NAME).strip() or DEFAULT_TASKFILE_NAME,
            dotenv_load=_env_bool(_k("DOTENV_LOAD"), True),
            echo=_env_bool(_k("ECHO"), True),
        )


_SETTINGS: Settings | None = None


def load_prefixed_dotenv(path: str | Path | None = None) -> list[str]:
    """
    Copy only TASKDECK_* keys from a .env into os.environ (existing variables win).

    Other keys stay out of the process environment; the child environment reads them
    from the .env beside the taskfile, and only when dotenv loading is enabled.
    """
    if path is None:
        path = find_dotenv(usecwd=True)
    if not path:
        return []
    applied: list[str] = []
    for key, value in dotenv_values(path).items():
        if value is None or not key.startswith(f"{ENV_PREFIX}_") or key in os.environ:
            continue
        os.environ[key] = value
        applied.append(key)
    return applied


def init_settings() -> Settings:
    """Load TASKDECK_* keys from a .env (searched upward from cwd), then read settings once."""
    global _SETTINGS
    if _SETTINGS is None:
        load_prefixed_dotenv()
        _SETTINGS = Settings.from_env()
    return _SETTINGS


def get_settings() -> Settings:
    return init_settings()
