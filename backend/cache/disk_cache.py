"""
File-hash disk cache for chart images and filled reports.
Chart: key = sha256(chart_url) -> image bytes.
Filled report: key = sha256(payload_json + overrides + template) -> PDF bytes.
Disabled entirely when FILL_CACHE_ENABLED=0.
"""
from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import Any

import config

logger = logging.getLogger(__name__)


def _chart_dir() -> Path:
    return config.cache_dir() / "charts"


def _report_dir() -> Path:
    return config.cache_dir() / "filled"


def _ensure_dir(d: Path) -> None:
    d.mkdir(parents=True, exist_ok=True)


def _read(path: Path) -> bytes | None:
    if not config.cache_enabled() or not path.is_file():
        return None
    try:
        return path.read_bytes()
    except OSError:
        return None


def _write(path: Path, data: bytes) -> None:
    if not config.cache_enabled():
        return
    try:
        _ensure_dir(path.parent)
        path.write_bytes(data)
    except OSError as e:
        logger.warning("cache write failed path=%s err=%s", path, e)


def _chart_key(url: str) -> str:
    return hashlib.sha256(url.encode("utf-8")).hexdigest()


def get_cached_chart(url: str) -> bytes | None:
    return _read(_chart_dir() / f"{_chart_key(url)}.img")


def set_cached_chart(url: str, data: bytes) -> None:
    _write(_chart_dir() / f"{_chart_key(url)}.img", data)


def _report_key(payload: dict[str, Any], overrides: list[tuple[str, str]], template: str) -> str:
    blob = json.dumps(
        {"payload": payload, "overrides": [list(o) for o in overrides], "template": template},
        sort_keys=True,
        default=str,
    )
    return hashlib.sha256(blob.encode()).hexdigest()


def get_cached_report(payload: dict[str, Any], overrides: list[tuple[str, str]], template: str) -> bytes | None:
    """Return cached PDF bytes, or None."""
    return _read(_report_dir() / f"{_report_key(payload, overrides, template)}.pdf")


def set_cached_report(
    payload: dict[str, Any], overrides: list[tuple[str, str]], template: str, pdf_bytes: bytes
) -> None:
    """Store PDF bytes in cache."""
    _write(_report_dir() / f"{_report_key(payload, overrides, template)}.pdf", pdf_bytes)
