from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Align(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    JUSTIFY = "justify"


class Origin(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"


class Category(str, Enum):
    """CTRL band categories. Declaration order is the ranking tie-break priority."""
    C = "C"
    T = "T"
    R = "R"
    L = "L"


class Box(BaseModel):
    """
    Named rectangular region on a template page.

    - x, y: lower-left corner (y in the system named by y_origin_top)
    - w, h: width and height in points
    - size: font size in points
    - max_lines: hard cap on rendered lines
    - line_gap: extra leading between consecutive lines
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    x: float = 0.0
    y: float = 0.0
    w: float = Field(gt=0)
    h: float = Field(ge=0.0, default=0.0)
    size: float = Field(gt=0, default=12.0)
    align: Align = Align.LEFT
    max_lines: int = Field(ge=1, default=1, validation_alias=AliasChoices("max_lines", "maxLines"))
    line_gap: float = Field(ge=0.0, default=2.0, validation_alias=AliasChoices("line_gap", "lineGap"))
    y_origin_top: bool = Field(default=False, validation_alias=AliasChoices("y_origin_top", "yOriginIsTop"))


class OverrideDirective(BaseModel):
    """One applied layout override."""
    raw_key: str
    path_tokens: List[str]
    property: str
    value: Any


class IgnoredOverride(BaseModel):
    key: str
    reason: str


class BandSet(BaseModel):
    """Tier sub-scores (low, mid, high) per category; every category present."""
    tiers: dict[Category, Tuple[float, float, float]]

    def total(self, category: Category) -> float:
        return float(sum(self.tiers.get(category, (0.0, 0.0, 0.0))))

    @property
    def totals(self) -> dict[Category, float]:
        return {c: self.total(c) for c in Category}


class DominantSecond(BaseModel):
    dom_key: str
    second_key: str
    raw_combo: str = Field(description="dom_key + second_key before whitelist validation")
    combo_key: str = Field(description="Whitelisted combo used for template selection")
    fallback_used: bool = False


class ChartPoint(BaseModel):
    label: str = ""
    normalized_value: float = Field(ge=0.0, le=1.0)
    color: str


class PlacedLine(BaseModel):
    """
    One rendered line. segments holds (text, x) runs: a single run for
    left/center/right, one run per word for justified lines.
    """
    text: str
    x: float
    y: float
    size: float
    width: float
    segments: List[Tuple[str, float]]


class BulletBlock(BaseModel):
    ordinal: int
    marker: str
    marker_x: float
    marker_y: float = Field(description="Vertical centre of the block's first line")
    size: float
    lines: List[PlacedLine]
    height: float


class ReportFields(BaseModel):
    """Draw-ready text pulled out of the request payload."""
    full_name: str = ""
    date_label: str = ""
    bands: dict[str, Any] = Field(default_factory=dict)
    band_values: Optional[List[Any]] = None
    chart_url: str = ""
    dom_hint: str = ""
    second_hint: str = ""

    exec_summary: Tuple[str, str] = ("", "")
    ctrl_overview: Tuple[str, str] = ("", "")
    ctrl_deepdive: Tuple[str, str] = ("", "")
    themes: Tuple[str, str] = ("", "")

    exec_questions: List[str] = Field(default_factory=list)
    overview_questions: List[str] = Field(default_factory=list)
    deepdive_questions: List[str] = Field(default_factory=list)
    themes_questions: List[str] = Field(default_factory=list)
    colleague_questions: List[str] = Field(default_factory=list)
    leader_questions: List[str] = Field(default_factory=list)

    adapt_colleagues: str = ""
    adapt_leaders: str = ""
    actions: List[str] = Field(default_factory=list)
