# File: tests/test_fetcher.py
from __future__ import annotations

import asyncio

import pytest
from aiohttp import ClientSession, web

from kb_scout.config import KnowledgeConfig
from kb_scout.crawler.fetcher import Fetcher
from kb_scout.errors import FetchError


@pytest.fixture()
def fetch_config() -> KnowledgeConfig:
    return KnowledgeConfig(request_timeout=0.5, crawl_delay=0)


async def _start(app: web.Application, port: int) -> web.AppRunner:
    runner = web.AppRunner(app)
    await runner.setup()
    await web.TCPSite(runner, "localhost", port).start()
    return runner


@pytest.mark.asyncio()
async def test_fetch_html(fetch_config, unused_tcp_port):
    app = web.Application()

    async def ok(_):
        return web.Response(text="<title>Hi</title>", content_type="text/html")

    app.router.add_get("/", ok)
    runner = await _start(app, unused_tcp_port)
    try:
        async with ClientSession() as session:
            page = await Fetcher(session, fetch_config).fetch(f"http://localhost:{unused_tcp_port}/")
    finally:
        await runner.cleanup()

    assert page.content == "<title>Hi</title>"
    assert page.content_type == "text/html"


@pytest.mark.asyncio()
async def test_binary_body_is_returned_as_bytes(fetch_config, unused_tcp_port):
    app = web.Application()

    async def pdf(_):
        return web.Response(body=b"%PDF-1.4", content_type="application/pdf")

    app.router.add_get("/doc.pdf", pdf)
    runner = await _start(app, unused_tcp_port)
    try:
        async with ClientSession() as session:
            page = await Fetcher(session, fetch_config).fetch(f"http://localhost:{unused_tcp_port}/doc.pdf")
    finally:
        await runner.cleanup()

    assert page.content == b"%PDF-1.4"


@pytest.mark.asyncio()
@pytest.mark.parametrize("status", [404, 500, 503])
async def test_non_success_status_raises(fetch_config, unused_tcp_port, status):
    app = web.Application()
    calls = {"n": 0}

    async def failing(_):
        calls["n"] += 1
        return web.Response(status=status)

    app.router.add_get("/", failing)
    runner = await _start(app, unused_tcp_port)
    try:
        async with ClientSession() as session:
            with pytest.raises(FetchError) as info:
                await Fetcher(session, fetch_config).fetch(f"http://localhost:{unused_tcp_port}/")
    finally:
        await runner.cleanup()

    assert info.value.reason == f"HTTP {status}"
    # no retry
    assert calls["n"] == 1


@pytest.mark.asyncio()
async def test_timeout_raises_fetch_error(fetch_config, unused_tcp_port):
    app = web.Application()

    async def slow(_):
        await asyncio.sleep(2)
        return web.Response(text="late", content_type="text/html")

    app.router.add_get("/", slow)
    runner = await _start(app, unused_tcp_port)
    try:
        async with ClientSession() as session:
            with pytest.raises(FetchError, match="timed out"):
                await Fetcher(session, fetch_config).fetch(f"http://localhost:{unused_tcp_port}/")
    finally:
        await runner.cleanup()


@pytest.mark.asyncio()
async def test_connection_refused_raises_fetch_error(fetch_config, unused_tcp_port):
    async with ClientSession() as session:
        with pytest.raises(FetchError):
            await Fetcher(session, fetch_config).fetch(f"http://localhost:{unused_tcp_port}/")


@pytest.mark.asyncio()
async def test_unencodable_host_raises_fetch_error(fetch_config):
    url = "https://knowledge.eptura.com" + "a" * 300 + "/x"
    async with ClientSession() as session:
        with pytest.raises(FetchError) as info:
            await Fetcher(session, fetch_config).fetch(url)
    assert info.value.url == url
