"""Add backend to path so tests can import top-level modules (models, layout, engine, ...)."""
import os
import sys

import pytest

_backend_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _backend_dir not in sys.path:
    sys.path.insert(0, _backend_dir)


@pytest.fixture
def template_dir(tmp_path, monkeypatch):
    """Placeholder templates for every combo in a temp dir; caching pointed at tmp and disabled."""
    from engine.bands import VALID_COMBOS
    from templates import render_placeholder_template, template_name

    out = tmp_path / "templates"
    out.mkdir()
    for combo in VALID_COMBOS:
        (out / template_name(combo)).write_bytes(render_placeholder_template(combo))
    monkeypatch.setenv("TEMPLATE_DIR", str(out))
    monkeypatch.setenv("FILL_CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.setenv("FILL_CACHE_ENABLED", "0")
    return out
