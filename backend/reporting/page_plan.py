"""
Draw plan: which payload text goes into which box on which template page.

build_draw_plan() is pure; it turns fields + a resolved layout into
positioned lines and bullet blocks per page. The overlay renderer only draws.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Sequence

from engine.bullets import BulletSpec, layout_bulleted, strip_marker
from engine.measure import DEFAULT_FONT, DEFAULT_FONT_BOLD, FontMetrics, TextMeasurer
from engine.text_flow import layout_text
from layout.coords import to_bottom_origin
from layout.defaults import PAGE_HEIGHT
from layout.tree import LayoutTree
from models import Box, BulletBlock, PlacedLine, ReportFields

PAGE_COUNT = 8
CHART_PAGE_INDEX = 3
CHART_BOX_PATH = ("p4", "p4Text", "chart")


@dataclass(frozen=True)
class TextSlot:
    page: int
    path: tuple[str, ...]
    value: Callable[[ReportFields], str]
    font: str = DEFAULT_FONT


@dataclass(frozen=True)
class QuestionSlot:
    page: int
    paths: tuple[tuple[str, ...], ...]
    value: Callable[[ReportFields], list[str]]


@dataclass
class TextOp:
    font: str
    line: PlacedLine


@dataclass
class BulletOp:
    font: str
    block: BulletBlock


@dataclass
class PageOps:
    index: int
    texts: list[TextOp] = field(default_factory=list)
    bullets: list[BulletOp] = field(default_factory=list)
    chart_box: Box | None = None

    @property
    def line_count(self) -> int:
        return len(self.texts) + sum(len(op.block.lines) for op in self.bullets)


@dataclass
class DrawPlan:
    pages: dict[int, PageOps]
    missing_boxes: list[str] = field(default_factory=list)
    undersized_boxes: list[str] = field(default_factory=list)

    def page(self, index: int) -> PageOps:
        return self.pages.setdefault(index, PageOps(index=index))

    def line_counts(self) -> dict[str, int]:
        return {f"p{i + 1}": ops.line_count for i, ops in sorted(self.pages.items())}


def _header_slots() -> list[TextSlot]:
    return [
        TextSlot(page, (f"p{page + 1}", "hdrName"), lambda f: f.full_name)
        for page in range(1, PAGE_COUNT)
    ]


TEXT_SLOTS: tuple[TextSlot, ...] = (
    TextSlot(0, ("p1", "name"), lambda f: f.full_name, DEFAULT_FONT_BOLD),
    TextSlot(0, ("p1", "date"), lambda f: f.date_label),
    *_header_slots(),
    TextSlot(2, ("p3", "p3Text", "exec1"), lambda f: f.exec_summary[0]),
    TextSlot(2, ("p3", "p3Text", "exec2"), lambda f: f.exec_summary[1]),
    TextSlot(3, ("p4", "p4Text", "ov1"), lambda f: f.ctrl_overview[0]),
    TextSlot(3, ("p4", "p4Text", "ov2"), lambda f: f.ctrl_overview[1]),
    TextSlot(4, ("p5", "p5Text", "dd1"), lambda f: f.ctrl_deepdive[0]),
    TextSlot(4, ("p5", "p5Text", "dd2"), lambda f: f.ctrl_deepdive[1]),
    TextSlot(4, ("p5", "p5Text", "th1"), lambda f: f.themes[0]),
    TextSlot(4, ("p5", "p5Text", "th2"), lambda f: f.themes[1]),
    TextSlot(5, ("p6", "p6WorkWith", "collabC"), lambda f: f.adapt_colleagues),
    TextSlot(5, ("p6", "p6WorkWith", "collabT"), lambda f: f.adapt_leaders),
    TextSlot(6, ("p7", "p7Actions", "act1"), lambda f: f.actions[0] if len(f.actions) > 0 else ""),
    TextSlot(6, ("p7", "p7Actions", "act2"), lambda f: f.actions[1] if len(f.actions) > 1 else ""),
    TextSlot(6, ("p7", "p7Actions", "act3"), lambda f: f.actions[2] if len(f.actions) > 2 else ""),
)

QUESTION_SLOTS: tuple[QuestionSlot, ...] = (
    QuestionSlot(2, tuple(("p3", "p3Q", f"exec_q{i}") for i in range(1, 5)), lambda f: f.exec_questions),
    QuestionSlot(3, (("p4", "p4Q", "ov_q1"), ("p4", "p4Q", "ov_q2")), lambda f: f.overview_questions),
    QuestionSlot(4, (("p5", "p5Q", "dd_q1"), ("p5", "p5Q", "dd_q2")), lambda f: f.deepdive_questions),
    QuestionSlot(4, (("p5", "p5Q", "th_q1"), ("p5", "p5Q", "th_q2")), lambda f: f.themes_questions),
    QuestionSlot(5, (("p6", "p6Q", "col_q1"),), lambda f: f.colleague_questions),
    QuestionSlot(5, (("p6", "p6Q", "lead_q1"),), lambda f: f.leader_questions),
)


def _height_for(canvas_height: float | Sequence[float], page: int) -> float:
    if isinstance(canvas_height, (int, float)):
        return float(canvas_height)
    return float(canvas_height[page]) if page < len(canvas_height) else PAGE_HEIGHT


def build_draw_plan(
    fields: ReportFields,
    layout: LayoutTree,
    canvas_height: float | Sequence[float] = PAGE_HEIGHT,
    measurer: TextMeasurer | None = None,
    bold_measurer: TextMeasurer | None = None,
) -> DrawPlan:
    measurer = measurer or FontMetrics(DEFAULT_FONT)
    bold_measurer = bold_measurer or FontMetrics(DEFAULT_FONT_BOLD)
    plan = DrawPlan(pages={i: PageOps(index=i) for i in range(PAGE_COUNT)})

    for slot in TEXT_SLOTS:
        box = layout.box(slot.path)
        if box is None:
            plan.missing_boxes.append(".".join(slot.path))
            continue
        text = slot.value(fields)
        if not text:
            continue
        lines = layout_text(
            text,
            box,
            _height_for(canvas_height, slot.page),
            measurer=bold_measurer if slot.font == DEFAULT_FONT_BOLD else measurer,
            ellipsis=True,
        )
        plan.page(slot.page).texts.extend(TextOp(font=slot.font, line=line) for line in lines)

    seen_by_page: dict[int, set[str]] = {}
    for slot in QUESTION_SLOTS:
        seen = seen_by_page.setdefault(slot.page, set())
        height = _height_for(canvas_height, slot.page)
        items = slot.value(fields)
        next_item = 0
        for path in slot.paths:
            box = layout.box(path)
            if box is None:
                plan.missing_boxes.append(".".join(path))
                continue
            while next_item < len(items):
                text = strip_marker(items[next_item])
                if not text or text.casefold() in seen:
                    next_item += 1
                    continue
                blocks = layout_bulleted([text], BulletSpec(box=box), height, measurer=measurer, seen=seen)
                if blocks:
                    plan.page(slot.page).bullets.extend(BulletOp(font=DEFAULT_FONT, block=b) for b in blocks)
                    next_item += 1
                else:
                    # box cannot hold a line; the item moves on to the next box
                    plan.undersized_boxes.append(".".join(path))
                break

    chart_box = layout.box(CHART_BOX_PATH)
    if chart_box is None:
        plan.missing_boxes.append(".".join(CHART_BOX_PATH))
    else:
        plan.page(CHART_PAGE_INDEX).chart_box = to_bottom_origin(
            chart_box, _height_for(canvas_height, CHART_PAGE_INDEX)
        )
    return plan
