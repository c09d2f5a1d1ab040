"""
Draw a DrawPlan onto template pages: each page gets a reportlab overlay
that is merged onto the template page with pypdf.
"""
from __future__ import annotations

import io
import logging

from pypdf import PdfReader, PdfWriter
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas as rl_canvas

from engine.bullets import LINE_CENTER_RATIO
from models import ChartPoint
from reporting.page_plan import DrawPlan, PageOps
from reporting.radar import draw_radar

logger = logging.getLogger(__name__)


def page_heights(template_bytes: bytes) -> list[float]:
    reader = PdfReader(io.BytesIO(template_bytes))
    return [float(page.mediabox.height) for page in reader.pages]


def _has_content(ops: PageOps, chart_image: bytes | None, chart_series: list[ChartPoint] | None) -> bool:
    if ops.texts or ops.bullets:
        return True
    return ops.chart_box is not None and (chart_image is not None or bool(chart_series))


def render_overlay_page(
    width: float,
    height: float,
    ops: PageOps,
    chart_image: bytes | None = None,
    chart_series: list[ChartPoint] | None = None,
) -> bytes:
    buf = io.BytesIO()
    c = rl_canvas.Canvas(buf, pagesize=(width, height))

    for op in ops.texts:
        c.setFont(op.font, op.line.size)
        for text, x in op.line.segments:
            c.drawString(x, op.line.y, text)

    for op in ops.bullets:
        block = op.block
        c.setFont(op.font, block.size)
        c.drawString(block.marker_x, block.marker_y - block.size * LINE_CENTER_RATIO, block.marker)
        for line in block.lines:
            for text, x in line.segments:
                c.drawString(x, line.y, text)

    box = ops.chart_box
    if box is not None:
        if chart_image is not None:
            c.drawImage(
                ImageReader(io.BytesIO(chart_image)),
                box.x,
                box.y,
                width=box.w,
                height=box.h,
                preserveAspectRatio=True,
                anchor="c",
                mask="auto",
            )
        elif chart_series:
            draw_radar(c, box, chart_series)

    c.showPage()
    c.save()
    return buf.getvalue()


def render_filled_pdf(
    template_bytes: bytes,
    plan: DrawPlan,
    chart_image: bytes | None = None,
    chart_series: list[ChartPoint] | None = None,
) -> bytes:
    """Merge every planned page onto the template and return the finished PDF."""
    reader = PdfReader(io.BytesIO(template_bytes))
    writer = PdfWriter()
    for index, page in enumerate(reader.pages):
        ops = plan.pages.get(index)
        if ops is not None and _has_content(ops, chart_image, chart_series):
            overlay = render_overlay_page(
                float(page.mediabox.width),
                float(page.mediabox.height),
                ops,
                chart_image=chart_image,
                chart_series=chart_series,
            )
            page.merge_page(PdfReader(io.BytesIO(overlay)).pages[0])
        writer.add_page(page)

    skipped = [i for i in plan.pages if i >= len(reader.pages) and plan.pages[i].line_count]
    if skipped:
        logger.warning("template has %d pages; planned content on pages %s dropped", len(reader.pages), skipped)

    out = io.BytesIO()
    writer.write(out)
    return out.getvalue()
