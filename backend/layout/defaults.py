"""Default box geometry for the 8-page Observer 180 template (US Letter, top-origin y)."""
from __future__ import annotations

from layout.tree import LayoutTree

PAGE_HEIGHT = 792.0
PAGE_WIDTH = 612.0


def _box(y: float, h: float, size: float, max_lines: int, *, x: float = 70, w: float = 470) -> dict:
    return {
        "x": x,
        "y": y,
        "w": w,
        "h": h,
        "size": size,
        "align": "left",
        "maxLines": max_lines,
        "yOriginIsTop": True,
    }


def _header() -> dict:
    return _box(30, 14, 10, 1, w=460)


_DEFAULT_PAGES: dict = {
    "p1": {
        "name": _box(70, 22, 22, 1, w=460),
        "date": _box(110, 16, 12, 1, w=460),
    },
    "p2": {"hdrName": _header()},
    "p3": {
        "hdrName": _header(),
        "p3Text": {
            "exec1": _box(200, 110, 12, 7),
            "exec2": _box(330, 110, 12, 7),
        },
        "p3Q": {
            "exec_q1": _box(421, 30, 11, 2),
            "exec_q2": _box(461, 30, 11, 2),
            "exec_q3": _box(501, 30, 11, 2),
            "exec_q4": _box(541, 30, 11, 2),
        },
    },
    "p4": {
        "hdrName": _header(),
        "p4Text": {
            "ov1": _box(190, 110, 12, 7),
            "ov2": _box(320, 110, 12, 7),
            "chart": _box(362, 160, 12, 1, x=300, w=240),
        },
        "p4Q": {
            "ov_q1": _box(571, 30, 11, 2),
            "ov_q2": _box(611, 30, 11, 2),
        },
    },
    "p5": {
        "hdrName": _header(),
        "p5Text": {
            "dd1": _box(190, 110, 12, 7),
            "dd2": _box(320, 110, 12, 7),
            "th1": _box(450, 90, 12, 6),
            "th2": _box(550, 90, 12, 6),
        },
        "p5Q": {
            "dd_q1": _box(371, 28, 11, 2),
            "dd_q2": _box(401, 28, 11, 2),
            "th_q1": _box(641, 28, 11, 2),
            "th_q2": _box(671, 28, 11, 2),
        },
    },
    "p6": {
        "hdrName": _header(),
        "p6WorkWith": {
            "collabC": _box(260, 140, 12, 10),
            "collabT": _box(430, 140, 12, 10),
        },
        "p6Q": {
            "col_q1": _box(551, 40, 11, 3),
            "lead_q1": _box(601, 40, 11, 3),
        },
    },
    "p7": {
        "hdrName": _header(),
        "p7Actions": {
            "act1": _box(260, 90, 12, 6),
            "act2": _box(380, 90, 12, 6),
            "act3": _box(500, 90, 12, 6),
        },
    },
    "p8": {"hdrName": _header()},
}

DEFAULT_LAYOUT = LayoutTree.from_dict(_DEFAULT_PAGES, frozen=True)


def new_request_layout() -> LayoutTree:
    """Fresh mutable layout for one request."""
    return DEFAULT_LAYOUT.clone()
