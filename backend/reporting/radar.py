"""Polar-area radar chart of a chart series, drawn with reportlab graphics."""
from __future__ import annotations

import math

from reportlab.graphics import renderPDF
from reportlab.graphics.shapes import Circle, Drawing, Line, String, Wedge
from reportlab.lib import colors

from engine.measure import DEFAULT_FONT
from models import Box, ChartPoint

GRID = colors.HexColor("#D9D9D9")
LABEL = colors.HexColor("#333333")
LABEL_SIZE = 8
RINGS = (0.25, 0.5, 0.75, 1.0)


def radar_drawing(series: list[ChartPoint], width: float, height: float) -> Drawing:
    """One wedge per point, radius proportional to normalized_value; first wedge centred at 12 o'clock."""
    d = Drawing(width, height)
    if not series or width <= 0 or height <= 0:
        return d
    cx, cy = width / 2, height / 2
    radius = max(0.0, min(width, height) / 2 - LABEL_SIZE * 1.6)
    if radius <= 0:
        return d

    for ring in RINGS:
        d.add(Circle(cx, cy, radius * ring, fillColor=None, strokeColor=GRID, strokeWidth=0.5))

    step = 360.0 / len(series)
    for i, point in enumerate(series):
        mid = 90.0 - i * step
        start, end = mid - step / 2, mid + step / 2
        r = radius * point.normalized_value
        if r > 0:
            d.add(Wedge(cx, cy, r, start, end, fillColor=colors.HexColor(point.color), strokeColor=colors.white, strokeWidth=0.5))
        a = math.radians(start)
        d.add(Line(cx, cy, cx + radius * math.cos(a), cy + radius * math.sin(a), strokeColor=GRID, strokeWidth=0.5))
        if point.label:
            la = math.radians(mid)
            lr = radius + LABEL_SIZE * 0.8
            d.add(
                String(
                    cx + lr * math.cos(la),
                    cy + lr * math.sin(la) - LABEL_SIZE / 3,
                    point.label,
                    fontName=DEFAULT_FONT,
                    fontSize=LABEL_SIZE,
                    fillColor=LABEL,
                    textAnchor="middle",
                )
            )
    return d


def draw_radar(canvas, box: Box, series: list[ChartPoint]) -> None:
    """Draw into `box` (bottom-origin) on a reportlab canvas."""
    renderPDF.draw(radar_drawing(series, box.w, box.h), canvas, box.x, box.y)
