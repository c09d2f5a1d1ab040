from __future__ import annotations

import pytest

from engine.measure import AverageCharWidth
from layout.defaults import DEFAULT_LAYOUT, new_request_layout
from layout.overrides import apply_overrides
from layout.tree import LayoutTree
from models import ReportFields
from reporting.page_plan import CHART_PAGE_INDEX, PAGE_COUNT, build_draw_plan

MEASURER = AverageCharWidth()


def _fields(**kwargs) -> ReportFields:
    base = dict(
        full_name="Ada Lovelace",
        date_label="5 March 2026",
        exec_summary=("Executive paragraph one.", "Executive paragraph two."),
        exec_questions=["Q1: First?", "Second?", "first?", "Third?"],
        actions=["Act on it", "", "Follow up"],
    )
    base.update(kwargs)
    return ReportFields(**base)


def _plan(fields: ReportFields, layout=DEFAULT_LAYOUT, height=792.0):
    return build_draw_plan(fields, layout, height, measurer=MEASURER, bold_measurer=MEASURER)


def _texts(plan, page: int) -> list[str]:
    return [op.line.text for op in plan.pages[page].texts]


def test_cover_page_and_headers():
    plan = _plan(_fields())
    assert len(plan.pages) == PAGE_COUNT
    assert _texts(plan, 0) == ["Ada Lovelace", "5 March 2026"]
    assert plan.pages[0].texts[0].font == "Helvetica-Bold"
    for page in range(1, PAGE_COUNT):
        assert _texts(plan, page)[0] == "Ada Lovelace"
    assert plan.missing_boxes == []


def test_text_lands_in_box_coordinates():
    plan = _plan(_fields())
    exec1 = DEFAULT_LAYOUT.box(["p3", "p3Text", "exec1"])
    line = next(op.line for op in plan.pages[2].texts if op.line.text.startswith("Executive paragraph one"))
    assert line.x == exec1.x
    assert line.y == 792 - exec1.y - exec1.size


def test_questions_fill_boxes_and_skip_duplicates():
    plan = _plan(_fields())
    bullets = plan.pages[2].bullets
    assert [b.block.lines[0].text for b in bullets] == ["First?", "Second?", "Third?"]
    q3 = DEFAULT_LAYOUT.box(["p3", "p3Q", "exec_q3"])
    assert bullets[2].block.marker_x == q3.x


def test_empty_actions_leave_box_empty():
    plan = _plan(_fields())
    assert "Act on it" in _texts(plan, 6)
    assert "Follow up" in _texts(plan, 6)
    assert len(_texts(plan, 6)) == 3


def test_chart_box_is_bottom_origin():
    plan = _plan(_fields())
    chart = plan.pages[CHART_PAGE_INDEX].chart_box
    assert chart is not None
    assert chart.y_origin_top is False
    assert chart.y == 792 - 362 - 160


def test_overrides_move_text():
    result = apply_overrides(new_request_layout(), [("p1_name_x", "200"), ("p1_name_align", "right")])
    plan = _plan(_fields(), layout=result.tree)
    name = plan.pages[0].texts[0].line
    assert name.x + name.width == pytest.approx(200 + 460)


def test_missing_boxes_are_reported():
    data = DEFAULT_LAYOUT.to_dict()
    del data["p1"]["name"]
    layout = LayoutTree.from_dict(data)
    plan = _plan(_fields(), layout=layout)
    assert "p1.name" in plan.missing_boxes
    assert _texts(plan, 0) == ["5 March 2026"]


def test_per_page_heights_and_line_counts():
    plan = build_draw_plan(_fields(), DEFAULT_LAYOUT, [792.0] * 3, measurer=MEASURER, bold_measurer=MEASURER)
    counts = plan.line_counts()
    assert counts["p1"] == 2
    assert counts["p3"] >= 6
    assert counts["p8"] == 1


def test_undersized_question_box_passes_items_on():
    result = apply_overrides(new_request_layout(), [("p3_p3Q_exec_q1_h", "5")])
    fields = _fields(exec_questions=["One?", "Two?", "Three?", "Four?"])
    plan = _plan(fields, layout=result.tree)
    bullets = plan.pages[2].bullets
    assert [b.block.lines[0].text for b in bullets] == ["One?", "Two?", "Three?"]
    q2 = DEFAULT_LAYOUT.box(["p3", "p3Q", "exec_q2"])
    assert bullets[0].block.marker_x == q2.x
    assert bullets[0].block.lines[0].y == 792 - q2.y - q2.size
    assert plan.undersized_boxes == ["p3.p3Q.exec_q1"]
    assert plan.missing_boxes == []
