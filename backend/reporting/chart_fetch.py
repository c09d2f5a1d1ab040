"""
Remote chart image fetch, bounded by a timeout.

A failed fetch never fails the report: callers get ChartFetch(image=None,
reason=...) and render without the chart.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import httpx

from cache.disk_cache import get_cached_chart, set_cached_chart

logger = logging.getLogger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
JPEG_SIGNATURE = b"\xff\xd8\xff"
MAX_CHART_BYTES = 5_000_000

_clock = time.monotonic


@dataclass(frozen=True)
class ChartFetch:
    image: bytes | None
    kind: str = ""
    reason: str | None = None
    cached: bool = False

    @property
    def available(self) -> bool:
        return self.image is not None


def image_kind(data: bytes) -> str:
    if data.startswith(PNG_SIGNATURE):
        return "png"
    if data.startswith(JPEG_SIGNATURE):
        return "jpeg"
    return ""


def unavailable(reason: str) -> ChartFetch:
    return ChartFetch(image=None, reason=reason)


def _download(client: httpx.Client, url: str, timeout_s: float) -> bytes | ChartFetch:
    """Stream the body, enforcing the size cap and an overall deadline for the whole request."""
    deadline = _clock() + timeout_s
    chunks: list[bytes] = []
    size = 0
    with client.stream("GET", url, timeout=timeout_s, follow_redirects=True) as response:
        response.raise_for_status()
        for chunk in response.iter_bytes():
            size += len(chunk)
            if size > MAX_CHART_BYTES:
                return unavailable("chart image too large")
            if _clock() > deadline:
                logger.warning("chart fetch exceeded %.1fs deadline url=%s", timeout_s, url[:140])
                return unavailable(f"timeout after {timeout_s:g}s")
            chunks.append(chunk)
    return b"".join(chunks)


def fetch_chart_image(url: str, timeout_s: float, *, client: httpx.Client | None = None) -> ChartFetch:
    """GET `url` and return PNG/JPEG bytes, or an unavailable result with a reason."""
    if not url:
        return unavailable("no chart url")
    if not url.lower().startswith(("http://", "https://")):
        return unavailable("chart url must be http(s)")

    cached = get_cached_chart(url)
    if cached is not None and image_kind(cached):
        return ChartFetch(image=cached, kind=image_kind(cached), cached=True)

    try:
        if client is not None:
            data = _download(client, url, timeout_s)
        else:
            with httpx.Client(timeout=timeout_s) as own_client:
                data = _download(own_client, url, timeout_s)
    except httpx.TimeoutException:
        logger.warning("chart fetch timed out after %.1fs url=%s", timeout_s, url[:140])
        return unavailable(f"timeout after {timeout_s:g}s")
    except httpx.HTTPError as e:
        logger.warning("chart fetch failed url=%s err=%s", url[:140], e)
        return unavailable(f"fetch failed: {e.__class__.__name__}")

    if isinstance(data, ChartFetch):
        return data
    kind = image_kind(data)
    if not kind:
        return unavailable("response is not a PNG or JPEG image")
    set_cached_chart(url, data)
    return ChartFetch(image=data, kind=kind)
