"""
Runtime settings from environment variables (.env is loaded by main).
Values are read on each call so tests can monkeypatch the environment.
"""
from __future__ import annotations

import os
from pathlib import Path

_REPO_ROOT = Path(__file__).resolve().parents[1]
_BACKEND_DIR = Path(__file__).resolve().parent


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


def template_dir() -> Path:
    """Directory holding the CTRL_PoC_180 template PDFs (default: <repo>/public)."""
    raw = os.environ.get("TEMPLATE_DIR", "").strip()
    return Path(raw) if raw else _REPO_ROOT / "public"


def chart_fetch_timeout_s() -> float:
    return max(0.1, _env_float("CHART_FETCH_TIMEOUT_S", 6.5))


def cache_enabled() -> bool:
    return os.environ.get("FILL_CACHE_ENABLED", "1").strip().lower() not in ("0", "false", "no", "off")


def cache_dir() -> Path:
    raw = os.environ.get("FILL_CACHE_DIR", "").strip()
    return Path(raw) if raw else _BACKEND_DIR / "cache"


def allowed_origins() -> list[str]:
    raw = os.environ.get("ALLOWED_ORIGINS", "").strip()
    if raw:
        return [o.strip() for o in raw.split(",") if o.strip()]
    return ["http://localhost:3000", "http://127.0.0.1:3000"]


def log_level() -> str:
    return (os.environ.get("LOG_LEVEL") or "INFO").strip().upper()


def version() -> str:
    return (os.environ.get("RENDER_GIT_COMMIT") or "").strip() or "unknown"
