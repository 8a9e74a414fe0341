"""Settings loaded from environment variables (+ optional .env).

Nothing here runs at import time; call ``load_settings()`` once at startup.
The store URL and key may be empty: the app still starts, store calls fail.
"""
from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_PREFIX = "RISKDASH"


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str = "") -> str:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v.strip()
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Capabilities:
    """What the dashboard window offers. Replaces the per-feature page copies."""
    can_edit: bool = True
    can_chart: bool = True
    alert_on_error: bool = True


@dataclass(frozen=True)
class Settings:
    # ---- store ----
    supabase_url: str
    supabase_key: str
    table: str
    http_timeout: float

    # ---- logging ----
    log_level: str
    log_dir: Path

    # ---- window ----
    window_geometry: str
    topmost: bool
    sync_interval_ms: int

    capabilities: Capabilities

    @property
    def store_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @staticmethod
    def from_env() -> "Settings":
        supabase_url = _first_env(_k("SUPABASE_URL"), "SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL")
        supabase_key = _first_env(_k("SUPABASE_KEY"), "SUPABASE_ANON_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY")

        log_dir_raw = _env(_k("LOG_DIR")).strip()
        log_dir = Path(log_dir_raw).expanduser() if log_dir_raw else Path(".local/riskdash")

        return Settings(
            supabase_url=supabase_url,
            supabase_key=supabase_key,
            table=_env(_k("TABLE"), "tasks").strip() or "tasks",
            http_timeout=_env_float(_k("HTTP_TIMEOUT"), 10.0),
            log_level=_env(_k("LOG_LEVEL"), "INFO").strip().upper() or "INFO",
            log_dir=log_dir,
            window_geometry=_env(_k("WINDOW_GEOMETRY"), "1100x760"),
            topmost=_env_bool(_k("TOPMOST"), False),
            sync_interval_ms=max(_env_int(_k("SYNC_INTERVAL_MS"), 0), 0),
            capabilities=Capabilities(
                can_edit=_env_bool(_k("CAN_EDIT"), True),
                can_chart=_env_bool(_k("CAN_CHART"), True),
                alert_on_error=_env_bool(_k("ALERT_ON_ERROR"), True),
            ),
        )


def load_settings(dotenv_path: Optional[str] = None) -> Settings:
    """Read a local .env (real env vars win) and build Settings."""
    load_dotenv(dotenv_path, override=False)
    return Settings.from_env()
