"""
Runtime layout overrides from flat query parameters.

  L_p3_p3Q_exec_q1_y=420     -> p3.p3Q.exec_q1.y = 420 (top-origin)
  L_p4_p4Text_chart_w=260    -> p4.p4Text.chart.w = 260
  L_origin=bottom            -> y values in this batch are bottom-origin

Resolution never raises: each rejected directive is reported in `ignored`.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from pydantic import ValidationError

from layout.tree import LayoutTree
from models import Align, Box, IgnoredOverride, Origin, OverrideDirective

logger = logging.getLogger(__name__)

DELIMITER = "_"
OVERRIDE_PREFIX = "L_"
ORIGIN_PARAM = "L_origin"

# Override name -> Box field
PROPERTIES: dict[str, str] = {
    "x": "x",
    "y": "y",
    "w": "w",
    "h": "h",
    "size": "size",
    "align": "align",
    "maxLines": "max_lines",
}

_ALIGN_SYNONYMS = {"centre": Align.CENTER}

# Geometry for boxes that an override creates from scratch
NEW_BOX_DEFAULTS: dict[str, Any] = {"x": 0.0, "y": 0.0, "w": 200.0, "h": 14.0, "size": 12.0, "max_lines": 1}


@dataclass
class OverrideResult:
    tree: LayoutTree
    applied: list[OverrideDirective] = field(default_factory=list)
    ignored: list[IgnoredOverride] = field(default_factory=list)


def parse_align(raw: Any) -> tuple[Align | None, str | None]:
    """Parse an alignment keyword. Returns (value, None) or (None, reason)."""
    text = str(raw if raw is not None else "").strip().lower()
    if text in _ALIGN_SYNONYMS:
        return _ALIGN_SYNONYMS[text], None
    try:
        return Align(text), None
    except ValueError:
        allowed = ", ".join(a.value for a in Align)
        return None, f"invalid align {raw!r} (expected one of: {allowed}, centre)"


def parse_origin(raw: Any) -> tuple[Origin | None, str | None]:
    text = str(raw if raw is not None else "").strip().lower()
    try:
        return Origin(text), None
    except ValueError:
        return None, f"invalid origin {raw!r} (expected top or bottom)"


def _finite_number(raw: Any) -> float | None:
    if isinstance(raw, bool):
        return None
    try:
        value = float(str(raw).strip())
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def coerce_value(prop: str, raw: Any) -> tuple[Any, str | None]:
    """Coerce a raw override value for `prop`. Returns (value, None) or (None, reason)."""
    if prop == "align":
        return parse_align(raw)
    number = _finite_number(raw)
    if number is None:
        return None, f"non-numeric value {raw!r} for {prop}"
    if prop in ("w", "size") and number <= 0:
        return None, f"{prop} must be > 0, got {number:g}"
    if prop == "h" and number < 0:
        return None, f"h must be >= 0, got {number:g}"
    if prop == "maxLines":
        if number < 1 or number != int(number):
            return None, f"maxLines must be a whole number >= 1, got {raw!r}"
        return int(number), None
    return number, None


def split_key(key: str) -> tuple[list[str], str | None]:
    """Split a de-prefixed key into (path tokens, property) or (tokens, None) if the last token is unknown."""
    tokens = [t for t in str(key).split(DELIMITER)]
    if not tokens or tokens[-1] not in PROPERTIES:
        return tokens, None
    return tokens[:-1], tokens[-1]


def resolve_path(tree: LayoutTree, tokens: Sequence[str]) -> tuple[list[str], str | None]:
    """
    Turn delimiter-split tokens into tree path segments.

    At each level the longest run of tokens whose delimiter-joined form is an
    existing child key is consumed as one segment (so 'examA_1' stays whole when
    the tree has that key); otherwise a single token is consumed. Read-only.
    Returns (segments, None) or (segments so far, reason).
    """
    segments: list[str] = []
    node: LayoutTree | Box | None = tree
    i = 0
    while i < len(tokens):
        if isinstance(node, Box):
            where = ".".join(segments)
            return segments, f"path collides with box '{where}' (group expected)"
        step = 1
        if isinstance(node, LayoutTree):
            for j in range(len(tokens), i + 1, -1):
                if DELIMITER.join(tokens[i:j]) in node:
                    step = j - i
                    break
        segment = DELIMITER.join(tokens[i:i + step])
        if not segment:
            return segments, "empty path segment"
        segments.append(segment)
        node = node.child(segment) if isinstance(node, LayoutTree) else None
        i += step
    return segments, None


def _apply_one(tree: LayoutTree, segments: list[str], prop: str, value: Any, origin: Origin) -> str | None:
    group = tree
    for depth, segment in enumerate(segments[:-1]):
        try:
            group = group.ensure_group(segment)
        except TypeError:
            return f"path collides with box '{'.'.join(segments[:depth + 1])}' (group expected)"

    leaf = segments[-1]
    existing = group.child(leaf)
    if isinstance(existing, LayoutTree):
        return f"'{'.'.join(segments)}' is a group, not a box"

    if existing is None:
        data = dict(NEW_BOX_DEFAULTS, y_origin_top=origin is Origin.TOP)
    else:
        data = existing.model_dump()
    data[PROPERTIES[prop]] = value
    if prop == "y":
        data["y_origin_top"] = origin is Origin.TOP

    try:
        group.set_box(leaf, Box.model_validate(data))
    except ValidationError as e:
        return f"invalid box after override: {e.errors()[0].get('msg', 'validation failed')}"
    return None


def apply_overrides(
    tree: LayoutTree,
    candidates: Iterable[tuple[str, Any]],
    origin: Origin = Origin.TOP,
) -> OverrideResult:
    """
    Apply (key, value) candidates, keys without the L_ prefix, onto `tree`.

    A frozen tree is cloned first; a mutable tree is updated in place and
    returned as result.tree. Later candidates win for the same path+property.
    """
    if tree.frozen:
        tree = tree.clone()
    result = OverrideResult(tree=tree)

    for raw_key, raw_value in candidates:
        path_tokens, prop = split_key(raw_key)
        if prop is None:
            result.ignored.append(IgnoredOverride(key=raw_key, reason="unknown property"))
            continue
        if not path_tokens or not any(path_tokens):
            result.ignored.append(IgnoredOverride(key=raw_key, reason="missing box path"))
            continue

        value, reason = coerce_value(prop, raw_value)
        if reason:
            result.ignored.append(IgnoredOverride(key=raw_key, reason=reason))
            continue

        segments, reason = resolve_path(tree, path_tokens)
        if reason is None:
            reason = _apply_one(tree, segments, prop, value, origin)
        if reason:
            result.ignored.append(IgnoredOverride(key=raw_key, reason=reason))
            continue

        result.applied.append(
            OverrideDirective(
                raw_key=raw_key,
                path_tokens=segments,
                property=prop,
                value=value.value if isinstance(value, Align) else value,
            )
        )

    if result.ignored:
        logger.debug("layout overrides ignored: %s", [(i.key, i.reason) for i in result.ignored])
    return result


def collect_override_params(
    params: Iterable[tuple[str, str]],
    prefix: str = OVERRIDE_PREFIX,
) -> tuple[list[tuple[str, str]], Origin, list[IgnoredOverride]]:
    """
    Pick override candidates out of query parameters.

    Returns (candidates with the prefix stripped, batch origin, problems with
    the origin parameter). Non-prefixed parameters are not overrides.
    """
    candidates: list[tuple[str, str]] = []
    origin = Origin.TOP
    problems: list[IgnoredOverride] = []
    for key, value in params:
        if key == ORIGIN_PARAM:
            parsed, reason = parse_origin(value)
            if parsed is None:
                problems.append(IgnoredOverride(key=key, reason=f"{reason}; using top"))
            else:
                origin = parsed
            continue
        if key.startswith(prefix) and len(key) > len(prefix):
            candidates.append((key[len(prefix):], value))
    return candidates, origin, problems
