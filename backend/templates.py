"""Template registry: one Observer 180 PDF per whitelisted dominant/second combo."""
from __future__ import annotations

from pathlib import Path

import config
from engine.bands import FALLBACK_COMBO, VALID_COMBOS

TEMPLATE_PREFIX = "CTRL_PoC_180_Assessment_Report_template_"


class TemplateNotFound(FileNotFoundError):
    pass


def template_name(combo: str) -> str:
    safe = combo if combo in VALID_COMBOS else FALLBACK_COMBO
    return f"{TEMPLATE_PREFIX}{safe}.pdf"


def template_path(combo: str) -> Path:
    return config.template_dir() / template_name(combo)


def load_template_bytes(combo: str) -> bytes:
    path = template_path(combo)
    if not path.is_file():
        raise TemplateNotFound(f"Template not found: {path.name}")
    return path.read_bytes()


def list_templates() -> dict[str, bool]:
    """combo -> whether its template file exists."""
    return {combo: template_path(combo).is_file() for combo in sorted(VALID_COMBOS)}


def render_placeholder_template(combo: str, pages: int = 8) -> bytes:
    """Blank letter-size template with a page label, for local runs and tests."""
    import io

    from reportlab.lib.pagesizes import letter
    from reportlab.pdfgen import canvas

    from engine.bands import CATEGORY_NAMES
    from models import Category

    safe = combo if combo in VALID_COMBOS else FALLBACK_COMBO
    title = f"{CATEGORY_NAMES[Category(safe[0])]} / {CATEGORY_NAMES[Category(safe[1])]}"
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for page in range(1, pages + 1):
        c.setFont("Helvetica", 8)
        c.setFillGray(0.6)
        c.drawString(36, 20, f"Observer 180 placeholder {safe} ({title}) page {page}/{pages}")
        c.showPage()
    c.save()
    return buf.getvalue()
