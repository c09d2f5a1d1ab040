"""
CTRL band aggregation and dominant/second ranking.

Band input is either a mapping keyed '<category>_<tier>' (tier suffix in
lowercase or capitalized form, e.g. C_low / C_Low) or a flat list of 12
values in category-major order: C low/mid/high, T low/mid/high, R..., L....
"""
from __future__ import annotations

import logging
import math
from typing import Any, Sequence

from models import BandSet, Category, DominantSecond

logger = logging.getLogger(__name__)

TIERS = ("low", "mid", "high")
# Explicit tie-break: earlier wins when totals are equal
CATEGORY_PRIORITY: tuple[Category, ...] = (Category.C, Category.T, Category.R, Category.L)
CATEGORY_NAMES = {
    Category.C: "Concealed",
    Category.T: "Triggered",
    Category.R: "Regulated",
    Category.L: "Lead",
}

VALID_COMBOS = frozenset({"CT", "CL", "CR", "TC", "TR", "TL", "RC", "RT", "RL", "LC", "LR", "LT"})
FALLBACK_COMBO = "CT"


def _number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def _tier_value(raw: dict[str, Any], category: Category, tier: str) -> float:
    for key in (f"{category.value}_{tier}", f"{category.value}_{tier.capitalize()}"):
        parsed = _number(raw.get(key))
        if parsed is not None:
            return parsed
    return 0.0


def aggregate(raw: dict[str, Any] | Sequence[Any] | None) -> BandSet:
    """Build a BandSet with every category present; missing or non-numeric values count as 0."""
    tiers: dict[Category, tuple[float, float, float]] = {}
    if isinstance(raw, (list, tuple)):
        values = [(_number(v) or 0.0) for v in raw]
        if len(values) != len(CATEGORY_PRIORITY) * len(TIERS):
            logger.debug("band list has %d values, expected 12; padding/truncating", len(values))
        values = (values + [0.0] * 12)[:12]
        for index, category in enumerate(CATEGORY_PRIORITY):
            low, mid, high = values[index * 3:index * 3 + 3]
            tiers[category] = (low, mid, high)
        return BandSet(tiers=tiers)

    data = raw if isinstance(raw, dict) else {}
    for category in CATEGORY_PRIORITY:
        tiers[category] = tuple(_tier_value(data, category, tier) for tier in TIERS)
    return BandSet(tiers=tiers)


def ranked_categories(bands: BandSet) -> list[Category]:
    """Categories by total, descending; ties broken by CATEGORY_PRIORITY."""
    totals = bands.totals
    return sorted(CATEGORY_PRIORITY, key=lambda c: (-totals[c], CATEGORY_PRIORITY.index(c)))


def normalize_hint(hint: Any) -> str:
    """'t', ' Triggered' -> 'T'; empty/None -> ''."""
    text = str(hint if hint is not None else "").strip().upper()
    return text[:1]


def resolve_combo(dom_key: str, second_key: str) -> tuple[str, bool]:
    """Return (combo, fallback_used). Anything off the whitelist becomes FALLBACK_COMBO."""
    combo = f"{dom_key}{second_key}"
    if combo in VALID_COMBOS:
        return combo, False
    return FALLBACK_COMBO, True


def rank(bands: BandSet, dom_hint: Any = None, second_hint: Any = None) -> DominantSecond:
    """
    Pick dominant and second categories.

    Non-empty hints are used as given; a missing key is filled from the
    ranking, skipping whatever the other key already holds.
    """
    dom = normalize_hint(dom_hint)
    second = normalize_hint(second_hint)

    if not dom or not second:
        order = [c.value for c in ranked_categories(bands)]
        if not dom:
            dom = next(c for c in order if c != second)
        if not second:
            second = next(c for c in order if c != dom)

    combo, fallback_used = resolve_combo(dom, second)
    if fallback_used:
        logger.info("combo %r not in whitelist; using %s", dom + second, FALLBACK_COMBO)
    return DominantSecond(
        dom_key=dom,
        second_key=second,
        raw_combo=dom + second,
        combo_key=combo,
        fallback_used=fallback_used,
    )
