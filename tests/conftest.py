# File: tests/conftest.py
from __future__ import annotations

import asyncio
from typing import Dict, List, Union

import pytest

from kb_scout.config import KnowledgeConfig, SeedSection
from kb_scout.crawler.models import PageData
from kb_scout.errors import FetchError

DOMAIN = "https://knowledge.eptura.com"
CONDECO = SeedSection(name="Condeco", url=f"{DOMAIN}/condeco")


class StubFetcher:
    """
    In-memory stand-in for the aiohttp fetcher.

    ``pages`` maps URL -> HTML, or -> an exception instance to raise.
    Unknown URLs fail like a 404. Every call is recorded in ``calls``.
    """

    def __init__(self, pages: Dict[str, Union[str, bytes, Exception]] | None = None, delay: float = 0.0):
        self.pages = dict(pages or {})
        self.calls: List[str] = []
        self.delay = delay

    async def fetch(self, url: str) -> PageData:
        self.calls.append(url)
        if self.delay:
            await asyncio.sleep(self.delay)
        body = self.pages.get(url)
        if body is None:
            raise FetchError(url, "HTTP 404")
        if isinstance(body, Exception):
            raise body
        return PageData(url, body, "text/html")


def page(title: str = "", body: str = "", links: List[str] = ()) -> str:
    anchors = "".join(f'<a href="{href}">{href.rsplit("/", 1)[-1]}</a>' for href in links)
    head = f"<title>{title}</title>" if title else ""
    return f"<html><head>{head}</head><body>{body}{anchors}</body></html>"


@pytest.fixture()
def config() -> KnowledgeConfig:
    """Single Condeco seed, no pacing delay."""
    return KnowledgeConfig(sections=[CONDECO], domain_prefix=DOMAIN, crawl_delay=0)


@pytest.fixture()
def stub_fetcher() -> StubFetcher:
    return StubFetcher()
