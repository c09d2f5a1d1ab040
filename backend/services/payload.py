"""
Request payload decoding and field extraction.

The same logical value can sit in several places in the JSON payload
(identity.fullName or fullName, ctrl.bands or bands, ...). Each field is an
ordered list of pure strategies; the first non-empty result wins.
"""
from __future__ import annotations

import base64
import binascii
import json
import re
from typing import Any, Callable, Sequence

from engine.text_flow import normalize_text
from models import ReportFields

Strategy = Callable[[dict], Any]


class PayloadError(ValueError):
    """The ?data= parameter could not be turned into a JSON object."""


def read_payload(data_b64: str | None) -> dict[str, Any]:
    """Decode base64 (standard or URL-safe, padding optional) JSON into a dict."""
    raw = (data_b64 or "").strip()
    if not raw:
        raise PayloadError("Missing data")
    normalized = raw.replace("-", "+").replace("_", "/").replace(" ", "+")
    normalized += "=" * (-len(normalized) % 4)
    try:
        decoded = base64.b64decode(normalized, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise PayloadError("Bad data base64") from e
    try:
        obj = json.loads(decoded)
    except json.JSONDecodeError as e:
        raise PayloadError("Bad data JSON") from e
    if not isinstance(obj, dict):
        raise PayloadError("Parsed data not an object")
    return obj


def dig(*path: str) -> Strategy:
    """Strategy reading a nested key path; None when any step is missing or not an object."""
    def _strategy(payload: dict) -> Any:
        node: Any = payload
        for key in path:
            if not isinstance(node, dict):
                return None
            node = node.get(key)
        return node
    _strategy.__name__ = "dig_" + "_".join(path)
    return _strategy


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (dict, list, tuple)):
        return bool(value)
    return True


def first_present(payload: dict, strategies: Sequence[Strategy], default: Any = None) -> Any:
    for strategy in strategies:
        value = strategy(payload)
        if _is_present(value):
            return value
    return default


def _dict_only(strategy: Strategy) -> Strategy:
    def _strategy(payload: dict) -> Any:
        value = strategy(payload)
        return value if isinstance(value, dict) else None
    return _strategy


def _list_only(strategy: Strategy) -> Strategy:
    def _strategy(payload: dict) -> Any:
        value = strategy(payload)
        return value if isinstance(value, (list, tuple)) else None
    return _strategy


FULL_NAME: list[Strategy] = [dig("identity", "fullName"), dig("fullName")]
DATE_LABEL: list[Strategy] = [dig("identity", "dateLabel"), dig("dateLbl")]
BANDS: list[Strategy] = [_dict_only(dig("ctrl", "bands")), _dict_only(dig("bands"))]
BAND_VALUES: list[Strategy] = [_list_only(dig("ctrl", "bandValues")), _list_only(dig("bandValues"))]
CHART_URL: list[Strategy] = [dig("chartUrl"), dig("spiderChartUrl"), dig("chart", "spiderUrl")]
DOM_HINT: list[Strategy] = [dig("ctrl", "dominantKey"), dig("dominantKey")]
SECOND_HINT: list[Strategy] = [dig("ctrl", "secondKey"), dig("secondKey")]


def action_strategies(n: int) -> list[Strategy]:
    return [dig("actions", f"actions{n}"), dig(f"Act{n}")]


def text_strategies(key: str) -> list[Strategy]:
    return [dig("text", key)]


_SENTENCE_END_RE = re.compile(r"(?<=[.!?])\s+")


def split_in_two(text: object) -> tuple[str, str]:
    """Split into two paragraphs at the middle sentence boundary, else at the character midpoint."""
    t = normalize_text(text)
    if not t:
        return "", ""
    parts = _SENTENCE_END_RE.split(t)
    if len(parts) <= 1:
        mid = -(-len(t) // 2)
        return t[:mid].strip(), t[mid:].strip()
    mid = -(-len(parts) // 2)
    return " ".join(parts[:mid]).strip(), " ".join(parts[mid:]).strip()


def _text(payload: dict, strategies: Sequence[Strategy]) -> str:
    return normalize_text(first_present(payload, strategies, ""))


def _questions(payload: dict, *keys: str) -> list[str]:
    return [q for q in (_text(payload, text_strategies(k)) for k in keys) if q]


def normalise_input(payload: dict[str, Any]) -> ReportFields:
    """Pull every draw-ready field out of the decoded payload."""
    return ReportFields(
        full_name=_text(payload, FULL_NAME),
        date_label=_text(payload, DATE_LABEL),
        bands=first_present(payload, BANDS, {}),
        band_values=first_present(payload, BAND_VALUES),
        chart_url=_text(payload, CHART_URL),
        dom_hint=_text(payload, DOM_HINT),
        second_hint=_text(payload, SECOND_HINT),
        exec_summary=split_in_two(_text(payload, text_strategies("exec_summary"))),
        ctrl_overview=split_in_two(_text(payload, text_strategies("ctrl_overview"))),
        ctrl_deepdive=split_in_two(_text(payload, text_strategies("ctrl_deepdive"))),
        themes=split_in_two(_text(payload, text_strategies("themes"))),
        exec_questions=_questions(
            payload, "exec_summary_q1", "exec_summary_q2", "exec_summary_q3", "exec_summary_q4"
        ),
        overview_questions=_questions(payload, "ctrl_overview_q1", "ctrl_overview_q2"),
        deepdive_questions=_questions(payload, "ctrl_deepdive_q1", "ctrl_deepdive_q2"),
        themes_questions=_questions(payload, "themes_q1", "themes_q2"),
        colleague_questions=_questions(payload, "adapt_with_colleagues_q1"),
        leader_questions=_questions(payload, "adapt_with_leaders_q2", "adapt_with_leaders_q1"),
        adapt_colleagues=_text(payload, text_strategies("adapt_with_colleagues")),
        adapt_leaders=_text(payload, text_strategies("adapt_with_leaders")),
        actions=[_text(payload, action_strategies(n)) for n in (1, 2, 3)],
    )
