"""Text width measurement strategies used by the text flow engine."""
from __future__ import annotations

from typing import Protocol

from reportlab.pdfbase import pdfmetrics

DEFAULT_FONT = "Helvetica"
DEFAULT_FONT_BOLD = "Helvetica-Bold"
# Average Helvetica advance as a share of the font size
AVERAGE_CHAR_FACTOR = 0.52


class TextMeasurer(Protocol):
    def width(self, text: str, size: float) -> float: ...


class FontMetrics:
    """Exact per-glyph advance widths from reportlab's font tables."""

    def __init__(self, font_name: str = DEFAULT_FONT) -> None:
        self.font_name = font_name

    def width(self, text: str, size: float) -> float:
        return pdfmetrics.stringWidth(text, self.font_name, size)

    def __repr__(self) -> str:
        return f"FontMetrics({self.font_name!r})"


class AverageCharWidth:
    """Fixed advance per character: len(text) * size * factor."""

    def __init__(self, factor: float = AVERAGE_CHAR_FACTOR) -> None:
        self.factor = factor

    def width(self, text: str, size: float) -> float:
        return len(text) * size * self.factor

    def __repr__(self) -> str:
        return f"AverageCharWidth({self.factor})"
