"""Shared fixtures for knowledge_scout tests.

Nothing here touches the network: sites are served by httpx.MockTransport.
"""

import sys
from pathlib import Path

import httpx
import pytest

# Add the repo root to path so tests can import knowledge_scout
sys.path.insert(0, str(Path(__file__).parent.parent))


def html_doc(body: str, title: str = "Acme Co", head: str = "") -> str:
    return f"<html><head><title>{title}</title>{head}</head><body>{body}</body></html>"


def site_transport(pages: dict, requested: list = None) -> httpx.MockTransport:
    """MockTransport serving {path: html}; unknown paths are 404s. Trailing slashes are ignored."""
    routes = {path.rstrip("/") or "/": body for path, body in pages.items()}

    def handler(request: httpx.Request) -> httpx.Response:
        if requested is not None:
            requested.append(str(request.url))
        path = request.url.path.rstrip("/") or "/"
        if path in routes:
            return httpx.Response(200, html=routes[path])
        return httpx.Response(404, text="not found")

    return httpx.MockTransport(handler)


@pytest.fixture
def make_page():
    """Build a Page from a body fragment (or a full document)."""
    from knowledge_scout.page import Page

    def _make(body: str, url: str = "https://acme.example", title: str = "Acme Co", head: str = "") -> Page:
        html = body if body.lstrip().lower().startswith("<html") else html_doc(body, title, head)
        return Page(url, html)

    return _make


@pytest.fixture
def settings():
    """Code-default settings with the browser fallback off."""
    from knowledge_scout.models import ScraperSettings

    return ScraperSettings(browser_fallback=False)


@pytest.fixture
def filler_text():
    """Enough neutral prose to clear the thin-page thresholds."""
    sentence = "Our crews handle residential and commercial projects across the region with care. "
    return sentence * 10


class FakeRenderer:
    """Stands in for BrowserRenderer; records its lifecycle."""

    def __init__(self, html):
        self.html = html
        self.exited = False
        self.urls = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.exited = True
        return False

    async def render(self, url):
        self.urls.append(url)
        return self.html
