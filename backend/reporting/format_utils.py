"""Filename and date label formatting for filled reports."""
from __future__ import annotations

import re
from datetime import datetime

DEFAULT_FILENAME_STEM = "CTRL_Observer_180_Report"

_MONTHS = {
    "jan": 1, "january": 1,
    "feb": 2, "february": 2,
    "mar": 3, "march": 3,
    "apr": 4, "april": 4,
    "may": 5,
    "jun": 6, "june": 6,
    "jul": 7, "july": 7,
    "aug": 8, "august": 8,
    "sep": 9, "sept": 9, "september": 9,
    "oct": 10, "october": 10,
    "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}
_DATE_LABEL_RE = re.compile(r"^(\d{1,2})\s+([A-Za-z]{3,9})\s+(\d{4})$")


def clamp_for_filename(value: str) -> str:
    text = re.sub(r"\s+", "_", str(value or "").strip())
    text = re.sub(r"[^A-Za-z0-9_\-]", "", text)
    text = re.sub(r"_+", "_", text)
    return text.strip("_")


def date_label_to_yyyymmdd(label: str) -> str:
    """'5 March 2026' -> '20260305'; '' for anything else (including impossible dates)."""
    m = _DATE_LABEL_RE.match(str(label or "").strip())
    if not m:
        return ""
    month = _MONTHS.get(m.group(2).lower())
    if month is None:
        return ""
    try:
        parsed = datetime(int(m.group(3)), month, int(m.group(1)))
    except ValueError:
        return ""
    return parsed.strftime("%Y%m%d")


def make_output_filename(full_name: str, date_label: str) -> str:
    stem = clamp_for_filename(full_name) or DEFAULT_FILENAME_STEM
    stamp = date_label_to_yyyymmdd(date_label)
    return f"{stem}_180_{stamp}.pdf" if stamp else f"{stem}_180.pdf"
