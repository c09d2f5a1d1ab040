from __future__ import annotations

import logging
import time
import traceback
import uuid
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load backend/.env before config is read
load_dotenv(Path(__file__).resolve().parent / ".env")

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware

import config
from cache.disk_cache import get_cached_report, set_cached_report
from reporting.fill import build_probe, prepare_fill, render_fill
from services.payload import PayloadError, read_payload
from templates import TemplateNotFound, list_templates, load_template_bytes

logging.basicConfig(level=config.log_level())
_LOG = logging.getLogger("uvicorn.error")

VERSION = config.version()

app = FastAPI(title="CTRL Observer 180 Fill Service", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        _LOG.info(
            "request_id=%s method=%s path=%s status=%s duration_ms=%.0f",
            request_id,
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        response.headers["X-Request-Id"] = request_id
        return response


app.add_middleware(RequestLogMiddleware)


@app.on_event("startup")
def startup_log() -> None:
    templates = list_templates()
    present = sum(1 for ok in templates.values() if ok)
    _LOG.info(
        "Fill service starting version=%s template_dir=%s templates=%d/%d cache=%s",
        VERSION,
        config.template_dir(),
        present,
        len(templates),
        "on" if config.cache_enabled() else "off",
    )
    if present < len(templates):
        missing = [combo for combo, ok in templates.items() if not ok]
        _LOG.warning("Templates missing for combos: %s", ", ".join(missing))


@app.get("/health")
def health():
    return {"status": "ok", "version": VERSION}


@app.get("/api/diag")
def diag():
    return {"ok": True, "runtime": "python"}


def _rid(request: Request) -> str:
    return getattr(request.state, "request_id", "") or "-"


@app.get("/api/fill-template")
def fill_template(
    request: Request,
    data: Optional[str] = Query(default=None),
    debug: Optional[str] = Query(default=None),
):
    """
    Fill the Observer 180 template chosen by the payload's dominant/second
    combo and return it as an inline PDF. ?debug=1 returns a JSON probe
    instead. L_* query parameters override the layout for this request only.
    """
    rid = _rid(request)
    try:
        payload = read_payload(data)
    except PayloadError as e:
        _LOG.info("FILL_ERR rid=%s status=400 err=%s", rid, e)
        raise HTTPException(status_code=400, detail=str(e)) from e

    try:
        ctx = prepare_fill(payload, request.query_params.multi_items())
        _LOG.info(
            "FILL_START rid=%s combo=%s tpl=%s overrides=%d",
            rid,
            ctx.dom_second.combo_key,
            ctx.template,
            len(ctx.overrides.applied),
        )
        if ctx.overrides.ignored:
            _LOG.info(
                "OVERRIDES_IGNORED rid=%s count=%d keys=%s",
                rid,
                len(ctx.overrides.ignored),
                [i.key for i in ctx.overrides.ignored][:20],
            )

        if debug == "1":
            return build_probe(ctx)

        cached = get_cached_report(payload, ctx.override_params, ctx.template)
        if cached is not None:
            _LOG.info("FILL_DONE rid=%s bytes=%d cached=1", rid, len(cached))
            return _pdf_response(cached, ctx.filename)

        template_bytes = load_template_bytes(ctx.dom_second.combo_key)
        outcome = render_fill(ctx, template_bytes)
        if outcome.chart_status == "unavailable":
            _LOG.info("CHART_SKIPPED rid=%s reasons=%s", rid, outcome.diagnostics)
        if not outcome.degraded:
            set_cached_report(payload, ctx.override_params, ctx.template, outcome.pdf)
        _LOG.info(
            "FILL_DONE rid=%s bytes=%d chart=%s lines=%s",
            rid,
            len(outcome.pdf),
            outcome.chart_status,
            outcome.plan.line_counts(),
        )
        return _pdf_response(outcome.pdf, ctx.filename)
    except TemplateNotFound as e:
        _LOG.info("FILL_ERR rid=%s status=500 err=%s", rid, e)
        return JSONResponse(status_code=500, content={"ok": False, "error": str(e)})
    except Exception as e:
        _LOG.error("FILL_ERR rid=%s status=500 err=%s\n%s", rid, str(e)[:400], traceback.format_exc())
        return JSONResponse(
            status_code=500,
            content={"ok": False, "error": f"fill-template error: {str(e)[:400]}"},
        )


def _pdf_response(pdf_bytes: bytes, filename: str) -> Response:
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'inline; filename="{filename}"',
            "Cache-Control": "no-store",
        },
    )


def get_app() -> FastAPI:
    """
    Convenience accessor for ASGI servers.
    """
    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8010,
        reload=True,
    )
