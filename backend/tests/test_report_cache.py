from __future__ import annotations

from cache.disk_cache import get_cached_report, set_cached_report


def test_report_cache_round_trip(tmp_path, monkeypatch):
    monkeypatch.setenv("FILL_CACHE_DIR", str(tmp_path))
    monkeypatch.setenv("FILL_CACHE_ENABLED", "1")
    payload = {"identity": {"fullName": "A"}}
    overrides = [("L_p1_name_x", "1"), ("L_p1_name_x", "2")]

    assert get_cached_report(payload, overrides, "t.pdf") is None
    set_cached_report(payload, overrides, "t.pdf", b"%PDF-1.4 data")
    assert get_cached_report(payload, overrides, "t.pdf") == b"%PDF-1.4 data"
    # override order is significant
    assert get_cached_report(payload, list(reversed(overrides)), "t.pdf") is None
    assert get_cached_report(payload, overrides, "other.pdf") is None


def test_disabled_cache_stores_nothing(tmp_path, monkeypatch):
    monkeypatch.setenv("FILL_CACHE_DIR", str(tmp_path))
    monkeypatch.setenv("FILL_CACHE_ENABLED", "0")
    set_cached_report({}, [], "t.pdf", b"x")
    assert get_cached_report({}, [], "t.pdf") is None
    assert not any(tmp_path.iterdir())
