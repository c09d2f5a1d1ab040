"""
Width-aware text flow for template boxes.

wrap_text() answers "which strings go on which line"; layout_text() adds
draw coordinates (bottom-origin) and alignment. Neither raises for empty text
or degenerate geometry: both return no lines.
"""
from __future__ import annotations

import math
import re

from engine.measure import FontMetrics, TextMeasurer
from layout.coords import box_top
from models import Align, Box, PlacedLine

ELLIPSIS = "..."

# Typographic punctuation -> WinAnsi-safe ASCII
_CHAR_MAP = {
    "\u2010": "-",
    "\u2011": "-",
    "\u2012": "-",
    "\u2013": "-",
    "\u2014": "-",
    "\u2212": "-",
    "\u2018": "'",
    "\u2019": "'",
    "\u201A": "'",
    "\u201B": "'",
    "\u201C": '"',
    "\u201D": '"',
    "\u201E": '"',
    "\u201F": '"',
    "\u2026": "...",
    "\u00A0": " ",
    "\u2007": " ",
    "\u202F": " ",
}
_CHAR_RE = re.compile("|".join(re.escape(c) for c in _CHAR_MAP))
_WS_RE = re.compile(r"\s+")

_DEFAULT_MEASURER = FontMetrics()


def winansi_safe(text: object) -> str:
    """Replace dashes, curly quotes, the ellipsis glyph and odd spaces with ASCII."""
    s = "" if text is None else str(text)
    return _CHAR_RE.sub(lambda m: _CHAR_MAP[m.group(0)], s)


def normalize_text(text: object) -> str:
    return _WS_RE.sub(" ", winansi_safe(text)).strip()


def wrap_words(text: str, width: float, size: float, measurer: TextMeasurer) -> list[str]:
    """Greedy word packing. A word wider than `width` gets a line of its own."""
    if width <= 0:
        return []
    lines: list[str] = []
    current = ""
    for word in text.split(" "):
        if not word:
            continue
        candidate = f"{current} {word}" if current else word
        if not current or measurer.width(candidate, size) <= width:
            current = candidate
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines


def wrap_to_char_budget(text: str, max_chars: int) -> list[str]:
    """
    Character-budget wrap: break on the last space that fits the budget,
    otherwise cut the string at the budget (long words are split).
    """
    text = normalize_text(text)
    if not text or max_chars <= 0:
        return []
    lines: list[str] = []
    rest = text
    while len(rest) > max_chars:
        split_at = rest.rfind(" ", 0, max_chars + 1)
        if split_at > 0:
            lines.append(rest[:split_at].rstrip())
            rest = rest[split_at + 1:].lstrip()
        else:
            lines.append(rest[:max_chars])
            rest = rest[max_chars:].lstrip()
    if rest:
        lines.append(rest)
    return lines


def char_budget_for(box: Box, factor: float = 0.52) -> int:
    """Rough per-line character capacity of a box."""
    return max(10, math.floor(box.w / (box.size * factor)))


def fit_with_ellipsis(line: str, width: float, size: float, measurer: TextMeasurer) -> str:
    """Trim trailing characters until `line + ELLIPSIS` fits `width`."""
    trimmed = line.rstrip()
    while trimmed and measurer.width(trimmed + ELLIPSIS, size) > width:
        trimmed = trimmed[:-1].rstrip()
    return trimmed + ELLIPSIS


def wrap_text(
    text: object,
    box: Box,
    *,
    measurer: TextMeasurer | None = None,
    max_lines: int | None = None,
    ellipsis: bool = False,
    char_budget: int | None = None,
) -> list[str]:
    """
    Wrap `text` to `box`, keeping at most min(max_lines, box.max_lines) lines.

    char_budget switches from measured-width wrapping to the character-budget
    variant. With `ellipsis`, a truncated last line ends in "...".
    """
    measurer = measurer or _DEFAULT_MEASURER
    limit = box.max_lines if max_lines is None else min(max_lines, box.max_lines)
    clean = normalize_text(text)
    if not clean or limit < 1 or box.w <= 0:
        return []

    if char_budget is not None:
        lines = wrap_to_char_budget(clean, char_budget)
    else:
        lines = wrap_words(clean, box.w, box.size, measurer)

    if len(lines) <= limit:
        return lines
    kept = lines[:limit]
    if ellipsis:
        kept[-1] = fit_with_ellipsis(kept[-1], box.w, box.size, measurer)
    return kept


def _justified_segments(
    line: str, x: float, width: float, size: float, measurer: TextMeasurer
) -> list[tuple[str, float]]:
    words = line.split(" ")
    space = measurer.width(" ", size)
    word_widths = [measurer.width(w, size) for w in words]
    natural = sum(word_widths) + space * (len(words) - 1)
    extra_per_gap = max(0.0, width - natural) / (len(words) - 1)
    segments: list[tuple[str, float]] = []
    cursor = x
    for word, ww in zip(words, word_widths):
        segments.append((word, cursor))
        cursor += ww + space + extra_per_gap
    return segments


def place_lines(
    lines: list[str],
    *,
    x: float,
    width: float,
    first_baseline: float,
    size: float,
    line_gap: float,
    align: Align,
    measurer: TextMeasurer | None = None,
) -> list[PlacedLine]:
    """Give wrapped lines x/y positions. Lines whose baseline falls below 0 are dropped."""
    measurer = measurer or _DEFAULT_MEASURER
    placed: list[PlacedLine] = []
    step = size + line_gap
    visible = [line for i, line in enumerate(lines) if first_baseline - i * step >= 0]
    last_index = len(visible) - 1
    for i, line in enumerate(visible):
        y = first_baseline - i * step
        natural = measurer.width(line, size)
        if align is Align.JUSTIFY and i < last_index and " " in line:
            segments = _justified_segments(line, x, width, size, measurer)
            placed.append(
                PlacedLine(text=line, x=x, y=y, size=size, width=max(width, natural), segments=segments)
            )
            continue
        if align is Align.RIGHT:
            lx = x + width - natural
        elif align is Align.CENTER:
            lx = x + (width - natural) / 2
        else:
            lx = x
        placed.append(PlacedLine(text=line, x=lx, y=y, size=size, width=natural, segments=[(line, lx)]))
    return placed


def layout_text(
    text: object,
    box: Box,
    canvas_height: float,
    *,
    measurer: TextMeasurer | None = None,
    max_lines: int | None = None,
    ellipsis: bool = False,
    char_budget: int | None = None,
) -> list[PlacedLine]:
    """Wrap, truncate and position `text` inside `box` on a canvas of the given height."""
    if canvas_height <= 0 or box.w <= 0:
        return []
    lines = wrap_text(
        text, box, measurer=measurer, max_lines=max_lines, ellipsis=ellipsis, char_budget=char_budget
    )
    if not lines:
        return []
    first_baseline = box_top(box, canvas_height) - box.size
    return place_lines(
        lines,
        x=box.x,
        width=box.w,
        first_baseline=first_baseline,
        size=box.size,
        line_gap=box.line_gap,
        align=box.align,
        measurer=measurer,
    )
