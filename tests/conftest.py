# File: tests/conftest.py
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Dict, List

import pytest
from aiohttp import web

from menu_scout.fetcher import FetchError, FetchErrorKind

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@asynccontextmanager
async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


class RecordingSleep:
    """Replacement for asyncio.sleep that records delays without waiting."""

    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class StubFetcher:
    """PageSource returning canned HTML per URL; unknown URLs fail with a transport error."""

    def __init__(self, pages: Dict[str, str]) -> None:
        self.pages = pages
        self.calls: List[str] = []

    async def fetch(self, url: str) -> str:
        self.calls.append(url)
        if url not in self.pages:
            raise FetchError(url, FetchErrorKind.TRANSPORT, f"Request failed: cannot connect to {url}")
        return self.pages[url]


@pytest.fixture()
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture()
def wp_header_html() -> str:
    """A typical WordPress theme header."""
    return """
    <html><head><title>Site</title></head>
    <body>
      <header id="masthead">
        <div class="logo"><a href="/">Logo</a></div>
        <nav id="site-navigation" class="main-navigation">
          <ul id="primary-menu" class="menu nav-menu">
            <li><a href="/">Главная</a></li>
            <li><a href="/about/">О компании</a></li>
            <li><a href="/services/" target="_blank" rel="noopener noreferrer">Услуги</a></li>
            <li><a href="#top">Наверх</a></li>
            <li><a href="/files/price.PDF">Прайс</a></li>
            <li><a href="/contacts/">  Контакты  </a></li>
          </ul>
        </nav>
      </header>
      <main><a href="/blog/">Blog</a></main>
      <footer><nav><a href="/privacy/">Privacy</a></nav></footer>
    </body></html>
    """
