"""Vertically stacked bullet lists built on the text flow engine."""
from __future__ import annotations

import math
import re
from dataclasses import dataclass

from engine.measure import TextMeasurer
from engine.text_flow import normalize_text, place_lines, wrap_text
from layout.coords import box_top, to_bottom_origin
from models import Box, BulletBlock

BULLET = "•"
INDENT = 12.0
BLOCK_GAP = 6.0
# Share of the font size between baseline and the optical centre of a line
LINE_CENTER_RATIO = 0.35

_LEADING_MARKER_RE = re.compile(
    r"^(?:[•·\-\*]+|\(?\d{1,2}[.)]|(?:q|question|action|act|item)\s*\d{0,2}\s*[:.)\-])\s*",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class BulletSpec:
    box: Box
    indent: float = INDENT
    block_gap: float = BLOCK_GAP
    marker: str = BULLET
    numbered: bool = False
    max_lines_per_item: int | None = None
    ellipsis: bool = True


def strip_marker(item: object) -> str:
    """Drop leading bullet glyphs, list numbers and 'Q1:'-style labels."""
    text = normalize_text(item)
    previous = None
    while text and text != previous:
        previous = text
        text = _LEADING_MARKER_RE.sub("", text, count=1).strip()
    return text


def layout_bulleted(
    items: list[object],
    spec: BulletSpec,
    canvas_height: float,
    *,
    measurer: TextMeasurer | None = None,
    seen: set[str] | None = None,
) -> list[BulletBlock]:
    """
    Lay out `items` top-down inside spec.box.

    Empty items and case-insensitive repeats (also of anything already in
    `seen`, which is updated) are skipped; ordinals count emitted blocks only.
    With box.h > 0 every line stays above the box bottom: blocks that would
    start below it are not emitted and longer items are truncated to fit.
    """
    box = spec.box
    text_width = box.w - spec.indent
    if canvas_height <= 0 or text_width <= 0:
        return []
    seen = seen if seen is not None else set()
    bottom = to_bottom_origin(box, canvas_height).y
    text_box = box.model_copy(update={"w": text_width})
    cursor_top = box_top(box, canvas_height)

    blocks: list[BulletBlock] = []
    for item in items:
        text = strip_marker(item)
        key = text.casefold()
        if not text or key in seen:
            continue

        first_baseline = cursor_top - box.size
        if first_baseline < 0 or (box.h > 0 and first_baseline < bottom):
            break

        max_lines = spec.max_lines_per_item
        if box.h > 0:
            fit = math.floor((first_baseline - bottom) / (box.size + box.line_gap)) + 1
            max_lines = fit if max_lines is None else min(max_lines, fit)
        lines = wrap_text(text, text_box, measurer=measurer, max_lines=max_lines, ellipsis=spec.ellipsis)
        placed = place_lines(
            lines,
            x=box.x + spec.indent,
            width=text_width,
            first_baseline=first_baseline,
            size=box.size,
            line_gap=box.line_gap,
            align=box.align,
            measurer=measurer,
        )
        if not placed:
            continue

        seen.add(key)
        ordinal = len(blocks) + 1
        height = len(placed) * box.size + (len(placed) - 1) * box.line_gap
        blocks.append(
            BulletBlock(
                ordinal=ordinal,
                marker=f"{ordinal}." if spec.numbered else spec.marker,
                marker_x=box.x,
                marker_y=first_baseline + box.size * LINE_CENTER_RATIO,
                size=box.size,
                lines=placed,
                height=height,
            )
        )
        cursor_top -= height + spec.block_gap
    return blocks
