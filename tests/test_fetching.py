"""Tests for page fetching, state-blob recovery and the rendering fallback."""

import asyncio
import json

import httpx
import pytest
from conftest import FakeRenderer, html_doc, site_transport

from knowledge_scout.fetcher import FetchError, PageFetcher, load_document
from knowledge_scout.state_blobs import (
    INJECTED_ID,
    augment_with_state_text,
    collect_prose,
    extract_state_text,
    inject_hidden_text,
    looks_like_prose,
)

PROSE = (
    "Acme Roofing has protected homes across central Ohio for three generations, "
    "replacing and repairing roofs with the same careful crews and honest estimates. "
)


def next_data(payload) -> str:
    return f'<script id="__NEXT_DATA__" type="application/json">{json.dumps(payload)}</script>'


# ─── state blobs ─────────────────────────────────────────────────────────────


class TestStateBlobs:

    def test_looks_like_prose(self):
        assert looks_like_prose(PROSE.strip())
        assert not looks_like_prose("https://acme.example/a/very/long/path/that/goes/on/and/on")
        assert not looks_like_prose("short")

    def test_collect_prose_walks_nested(self):
        data = {"props": {"items": [{"body": PROSE}, {"id": 4}], "title": "Home"}}
        assert collect_prose(data, []) == [PROSE.strip()]

    def test_malformed_blob_yields_nothing(self):
        html = '<html><body><script id="__NEXT_DATA__">{broken</script></body></html>'
        assert extract_state_text(html) is None

    def test_inject_escapes_markup(self):
        html = inject_hidden_text("<html><body><p>x</p></body></html>", "<b>bold</b> & more")
        assert f'<div id="{INJECTED_ID}"' in html
        assert "&lt;b&gt;bold&lt;/b&gt; &amp; more" in html
        assert html.index(INJECTED_ID) < html.index("</body>")

    def test_augment_requires_enough_text(self):
        short = html_doc(next_data({"props": {"text": "Just a little bit of prose in here, not much."}}))
        assert augment_with_state_text(short) is None
        rich = html_doc(next_data({"props": {"text": PROSE * 2}}))
        assert INJECTED_ID in augment_with_state_text(rich)


# ─── fetcher ─────────────────────────────────────────────────────────────────


class TestFetcher:

    def test_non_success_status_raises(self, settings):
        async def run():
            async with PageFetcher(settings, transport=site_transport({})) as fetcher:
                await fetcher.fetch("https://acme.example/missing")

        with pytest.raises(FetchError) as info:
            asyncio.run(run())
        assert info.value.reason == "HTTP 404: Not Found"

    def test_try_fetch_returns_none(self, settings):
        async def run():
            async with PageFetcher(settings, transport=site_transport({"/": "<p>home</p>"})) as fetcher:
                return await fetcher.try_fetch("https://acme.example/missing"), fetcher.requested

        html, requested = asyncio.run(run())
        assert html is None
        assert requested == ["https://acme.example/missing"]

    def test_sends_user_agent(self, settings):
        seen = []

        def handler(request):
            seen.append(request.headers["User-Agent"])
            return httpx.Response(200, text="ok")

        async def run():
            async with PageFetcher(settings, transport=httpx.MockTransport(handler)) as fetcher:
                return await fetcher.fetch("https://acme.example/")

        assert asyncio.run(run()) == "ok"
        assert seen == [settings.user_agent]

    def test_fetch_outside_context_manager(self, settings):
        with pytest.raises(RuntimeError):
            asyncio.run(PageFetcher(settings).fetch("https://acme.example/"))


# ─── load_document ───────────────────────────────────────────────────────────


class TestLoadDocument:

    def _load(self, settings, html, renderer_factory=None):
        async def run():
            async with PageFetcher(settings, transport=site_transport({"/": html})) as fetcher:
                return await load_document("https://acme.example/", fetcher, renderer_factory, settings)

        return asyncio.run(run())

    def test_rich_page_is_static(self, settings):
        fake = FakeRenderer("<html></html>")
        loaded = self._load(settings, html_doc(f"<p>{PROSE * 4}</p>"), lambda: fake)
        assert loaded.source == "static"
        assert fake.urls == []

    def test_thin_page_uses_state_blob(self, settings):
        html = html_doc("<div id='root'></div>" + next_data({"props": {"pageProps": {"about": PROSE * 3}}}))
        loaded = self._load(settings, html)
        assert loaded.source == "state"
        assert "three generations" in loaded.page.main_text

    def test_thin_page_falls_back_to_browser(self, settings):
        rendered = html_doc(f"<main><p>{PROSE * 10}</p></main>")
        fake = FakeRenderer(rendered)
        loaded = self._load(settings, html_doc("<div id='root'></div>"), lambda: fake)
        assert loaded.source == "browser"
        assert loaded.html == rendered
        assert fake.urls == ["https://acme.example/"]
        assert fake.exited

    def test_small_render_is_ignored(self, settings):
        fake = FakeRenderer("<html><body>tiny</body></html>")
        loaded = self._load(settings, html_doc("<div id='root'></div>"), lambda: fake)
        assert loaded.source == "static"
        assert fake.exited

    def test_main_page_failure_propagates(self, settings):
        async def run():
            async with PageFetcher(settings, transport=site_transport({})) as fetcher:
                await load_document("https://acme.example/", fetcher, None, settings)

        with pytest.raises(FetchError):
            asyncio.run(run())

