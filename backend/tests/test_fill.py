from __future__ import annotations

import io

from pypdf import PdfReader

from reporting.fill import build_probe, prepare_fill, render_fill
from templates import load_template_bytes

PAYLOAD = {
    "identity": {"fullName": "Grace Hopper", "dateLabel": "9 December 2025"},
    "ctrl": {"bands": {"C_low": 1, "T_low": 2, "R_mid": 6, "L_high": 4}},
    "text": {"exec_summary": "Compilers matter. People matter more."},
}


def test_prepare_fill_ranks_and_names():
    ctx = prepare_fill(PAYLOAD)
    assert ctx.dom_second.combo_key == "RL"
    assert ctx.template == "CTRL_PoC_180_Assessment_Report_template_RL.pdf"
    assert ctx.filename == "Grace_Hopper_180_20251209.pdf"
    assert len(ctx.series) == 4


def test_prepare_fill_applies_only_prefixed_params():
    params = [("data", "abc"), ("L_p1_name_x", "120"), ("L_p1_name_bogus", "1"), ("L_origin", "up")]
    ctx = prepare_fill(PAYLOAD, params)
    assert ctx.overrides.tree.box(["p1", "name"]).x == 120
    assert [i.key for i in ctx.overrides.ignored] == ["L_origin", "p1_name_bogus"]
    assert ctx.override_params == [("L_p1_name_x", "120"), ("L_p1_name_bogus", "1"), ("L_origin", "up")]


def test_band_values_drive_twelve_spokes():
    ctx = prepare_fill({"bandValues": [1] * 12})
    assert len(ctx.series) == 12


def test_probe_reports_template_and_overrides():
    probe = build_probe(prepare_fill(PAYLOAD, [("L_p3_p3Text_exec1_w", "-5")]))
    assert probe["ok"] is True
    assert probe["template"] == {
        "combo": "RL",
        "safeCombo": "RL",
        "tpl": "CTRL_PoC_180_Assessment_Report_template_RL.pdf",
    }
    assert probe["identity"]["fullName"] == "Grace Hopper"
    assert probe["textLengths"]["exec1"] == len("Compilers matter.")
    assert probe["layoutOverrides"]["appliedCount"] == 0
    assert probe["layoutOverrides"]["ignoredCount"] == 1
    assert probe["lineCounts"]["p1"] == 2
    assert probe["missingBoxes"] == []


def test_render_fill_without_chart_url_uses_bands(template_dir):
    ctx = prepare_fill(PAYLOAD)
    outcome = render_fill(ctx, load_template_bytes(ctx.dom_second.combo_key))
    assert outcome.chart_status == "bands"
    assert not outcome.degraded
    assert len(PdfReader(io.BytesIO(outcome.pdf)).pages) == 8


def test_render_fill_with_bad_chart_url_is_degraded(template_dir):
    ctx = prepare_fill({**PAYLOAD, "chartUrl": "ftp://example.com/chart.png"})
    outcome = render_fill(ctx, load_template_bytes(ctx.dom_second.combo_key))
    assert outcome.chart_status == "unavailable"
    assert outcome.degraded
    assert outcome.diagnostics[0].startswith("chart skipped")


def test_render_fill_with_no_data_draws_no_chart(template_dir):
    ctx = prepare_fill({})
    outcome = render_fill(ctx, load_template_bytes(ctx.dom_second.combo_key))
    assert ctx.dom_second.combo_key == "CT"
    assert outcome.chart_status == "none"
