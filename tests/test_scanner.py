# File: tests/test_scanner.py
"""Сквозные проверки: настоящий Fetcher, ClientSession и локальный aiohttp-сервер."""
from __future__ import annotations

import asyncio

import pytest
from aiohttp import web

import menu_scout.orchestrator as orchestrator_module
from conftest import serve_app
from menu_scout.config import ScanOptions
from menu_scout.fetcher import Fetcher
from menu_scout.orchestrator import MenuScanner
from menu_scout.scanner import scan_sites, start_scan

MENU_PAGE = """
<html><body>
  <header><nav class="main-navigation">
    <a href="/">Главная</a><a href="/about/">О нас</a><a href="/">Главная</a>
    <a href="/price.pdf">Прайс</a>
  </nav></header>
</body></html>
"""


def make_site(seen_headers: dict, calls: dict) -> web.Application:
    async def root(request):
        calls["root"] = calls.get("root", 0) + 1
        seen_headers.update({k.lower(): v for k, v in request.headers.items()})
        return web.Response(text=MENU_PAGE, content_type="text/html")

    async def flaky(_):
        calls["flaky"] = calls.get("flaky", 0) + 1
        if calls["flaky"] == 1:
            return web.Response(status=502)
        return web.Response(text=MENU_PAGE, content_type="text/html")

    async def slow(_):
        await asyncio.sleep(1.5)
        return web.Response(text=MENU_PAGE, content_type="text/html")

    app = web.Application()
    app.router.add_get("/", root)
    app.router.add_get("/flaky", flaky)
    app.router.add_get("/slow", slow)
    return app


@pytest.fixture()
def route_to(monkeypatch):
    """Map made-up domains onto URLs of the local server; other addresses keep normal validation."""
    routes: dict = {}
    real_normalize = orchestrator_module.normalize

    def fake_normalize(raw: str) -> str:
        url = real_normalize(raw)
        host = url.split("://", 1)[1]
        return routes.get(host, url)

    monkeypatch.setattr(orchestrator_module, "normalize", fake_normalize)
    return routes


@pytest.mark.asyncio()
async def test_start_scan_with_real_fetcher(unused_tcp_port, route_to):
    seen_headers: dict = {}
    calls: dict = {}
    options = ScanOptions(
        batch_size=2,
        timeout_ms=1000,
        max_retries=2,
        retry_delay_ms=0,
        user_agent="MenuScoutTest/1.0",
        headers={"Accept-Language": "ru"},
    )

    async with serve_app(make_site(seen_headers, calls), unused_tcp_port) as base:
        route_to.update({
            "menu.test": base + "/",
            "flaky.test": base + "/flaky",
            "slow.test": base + "/slow",
        })
        report = await start_scan(
            ["menu.test", "not a domain", "flaky.test", "slow.test"],
            options,
        )

    menu, invalid, flaky, slow = report.results
    assert [(i.text, i.url) for i in menu.items] == [("Главная", "/"), ("О нас", "/about/")]
    assert menu.error is None
    assert invalid.error is not None and invalid.items == ()
    assert flaky.error is None and len(flaky.items) == 2
    assert calls["flaky"] == 2
    assert slow.error == "Timed out after 1 s"
    assert report.total_processed == 4
    assert report.error_count == 2

    assert seen_headers["user-agent"] == "MenuScoutTest/1.0"
    assert seen_headers["accept-language"] == "ru"
    assert seen_headers["accept"].startswith("text/html")


@pytest.mark.asyncio()
async def test_scanner_context_owns_session():
    scanner = MenuScanner(ScanOptions(timeout_ms=2000, max_retries=4, retry_delay_ms=250))
    async with scanner:
        assert isinstance(scanner.fetcher, Fetcher)
        assert scanner.session is not None and not scanner.session.closed
        policy = scanner.fetcher.policy
        assert (policy.timeout, policy.max_retries, policy.retry_delay) == (2.0, 4, 0.25)
    assert scanner.session.closed


def test_scan_sites_is_synchronous():
    report = scan_sites(["localhost", "-foo.com", "сайт.com"])
    assert report.total_processed == 3
    assert report.error_count == 3
    assert [r.site_url for r in report.results] == ["localhost", "-foo.com", "сайт.com"]
