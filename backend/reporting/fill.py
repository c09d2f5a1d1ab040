"""
Fill pipeline for one request.

prepare_fill() does all pure work (fields, ranking, overrides, series);
render_fill() does the I/O-bound part (chart fetch, template merge).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

import config
from engine.bands import CATEGORY_NAMES, aggregate, rank
from engine.chart_series import to_series
from layout.defaults import PAGE_HEIGHT, new_request_layout
from layout.overrides import OverrideResult, apply_overrides, collect_override_params
from models import BandSet, ChartPoint, DominantSecond, ReportFields
from reporting.chart_fetch import ChartFetch, fetch_chart_image
from reporting.format_utils import make_output_filename
from reporting.overlay import page_heights, render_filled_pdf
from reporting.page_plan import DrawPlan, build_draw_plan
from services.payload import normalise_input
from templates import template_name

logger = logging.getLogger(__name__)


@dataclass
class FillContext:
    payload: dict[str, Any]
    fields: ReportFields
    bands: BandSet
    dom_second: DominantSecond
    template: str
    overrides: OverrideResult
    override_params: list[tuple[str, str]]
    series: list[ChartPoint]
    filename: str


@dataclass
class FillOutcome:
    pdf: bytes
    plan: DrawPlan
    chart_status: str
    diagnostics: list[str] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return bool(self.diagnostics)


def prepare_fill(payload: dict[str, Any], params: Iterable[tuple[str, str]] = ()) -> FillContext:
    fields = normalise_input(payload)
    band_source: Any = fields.band_values if fields.band_values else fields.bands
    bands = aggregate(band_source)
    dom_second = rank(bands, fields.dom_hint, fields.second_hint)

    params = list(params)
    candidates, origin, origin_problems = collect_override_params(params)
    overrides = apply_overrides(new_request_layout(), candidates, origin)
    overrides.ignored[:0] = origin_problems

    series = to_series(fields.band_values) if fields.band_values else to_series(bands)
    return FillContext(
        payload=payload,
        fields=fields,
        bands=bands,
        dom_second=dom_second,
        template=template_name(dom_second.combo_key),
        overrides=overrides,
        override_params=[(k, v) for k, v in params if k.startswith("L_")],
        series=series,
        filename=make_output_filename(fields.full_name, fields.date_label),
    )


def _has_band_data(bands: BandSet) -> bool:
    return any(total > 0 for total in bands.totals.values())


def render_fill(ctx: FillContext, template_bytes: bytes, *, timeout_s: float | None = None) -> FillOutcome:
    heights = page_heights(template_bytes)
    plan = build_draw_plan(ctx.fields, ctx.overrides.tree, heights or PAGE_HEIGHT)
    diagnostics = [f"missing box {path}" for path in plan.missing_boxes]
    if plan.undersized_boxes:
        logger.info("boxes too small for a line tpl=%s boxes=%s", ctx.template, plan.undersized_boxes)

    chart_image: bytes | None = None
    chart_series: list[ChartPoint] | None = None
    if ctx.fields.chart_url:
        fetched: ChartFetch = fetch_chart_image(
            ctx.fields.chart_url, timeout_s if timeout_s is not None else config.chart_fetch_timeout_s()
        )
        if fetched.available:
            chart_image = fetched.image
            chart_status = "image"
        else:
            chart_status = "unavailable"
            diagnostics.append(f"chart skipped: {fetched.reason}")
    elif _has_band_data(ctx.bands):
        chart_series = ctx.series
        chart_status = "bands"
    else:
        chart_status = "none"

    pdf = render_filled_pdf(template_bytes, plan, chart_image=chart_image, chart_series=chart_series)
    if diagnostics:
        logger.info("fill degraded tpl=%s diagnostics=%s", ctx.template, diagnostics)
    return FillOutcome(pdf=pdf, plan=plan, chart_status=chart_status, diagnostics=diagnostics)


def build_probe(ctx: FillContext) -> dict[str, Any]:
    """Debug JSON describing what a fill would do, without touching the template."""
    f = ctx.fields
    plan = build_draw_plan(f, ctx.overrides.tree, PAGE_HEIGHT)
    text_lengths = {
        "exec1": len(f.exec_summary[0]),
        "exec2": len(f.exec_summary[1]),
        "ov1": len(f.ctrl_overview[0]),
        "ov2": len(f.ctrl_overview[1]),
        "dd1": len(f.ctrl_deepdive[0]),
        "dd2": len(f.ctrl_deepdive[1]),
        "th1": len(f.themes[0]),
        "th2": len(f.themes[1]),
        "adapt_colleagues": len(f.adapt_colleagues),
        "adapt_leaders": len(f.adapt_leaders),
        **{f"act{i + 1}": len(a) for i, a in enumerate(f.actions)},
    }
    return {
        "ok": True,
        "where": "fill-template:OBSERVER_180:debug",
        "template": {
            "combo": ctx.dom_second.raw_combo,
            "safeCombo": ctx.dom_second.combo_key,
            "tpl": ctx.template,
        },
        "domSecond": ctx.dom_second.model_dump(),
        "identity": {"fullName": f.full_name, "dateLabel": f.date_label},
        "filename": ctx.filename,
        "bands": {CATEGORY_NAMES[c]: total for c, total in ctx.bands.totals.items()},
        "series": [p.model_dump() for p in ctx.series],
        "textLengths": text_lengths,
        "questions": {
            "exec": len(f.exec_questions),
            "overview": len(f.overview_questions),
            "deepdive": len(f.deepdive_questions),
            "themes": len(f.themes_questions),
            "colleagues": len(f.colleague_questions),
            "leaders": len(f.leader_questions),
        },
        "chart": {"chartUrl": f.chart_url[:140], "hasChartUrl": bool(f.chart_url)},
        "layoutOverrides": {
            "appliedCount": len(ctx.overrides.applied),
            "ignoredCount": len(ctx.overrides.ignored),
            "applied": [d.model_dump() for d in ctx.overrides.applied],
            "ignored": [i.model_dump() for i in ctx.overrides.ignored],
        },
        "lineCounts": plan.line_counts(),
        "missingBoxes": plan.missing_boxes,
        "undersizedBoxes": plan.undersized_boxes,
    }
