# === FILE: kb_scout/crawler/crawler.py ===
from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Set

from aiohttp import ClientSession, ClientTimeout

from kb_scout.config import KnowledgeConfig, SeedSection
from kb_scout.crawler.fetcher import Fetcher
from kb_scout.crawler.models import CrawlReport, CrawlTarget, Document
from kb_scout.errors import ExtractError, FetchError
from kb_scout.logger import logger
from kb_scout.parser.html_parser import LinkCandidate, parse_html
from kb_scout.store import DocumentStore

__all__ = ("KnowledgeCrawler",)


class KnowledgeCrawler:
    """
    Depth-bounded, strictly sequential crawler that writes into a DocumentStore.

    Traversal is depth-first per seed section using an explicit stack of
    CrawlTarget entries. A URL is fetched at most once per pass; discovered
    links already present in the store are not queued again.
    """

    def __init__(
        self,
        config: KnowledgeConfig,
        store: DocumentStore,
        fetcher: Optional[Fetcher] = None,
    ) -> None:
        self.config = config
        self.store = store
        self._fetcher = fetcher
        self._session: Optional[ClientSession] = None

    async def __aenter__(self) -> KnowledgeCrawler:
        if self._fetcher is None:
            self._session = ClientSession(
                timeout=ClientTimeout(total=self.config.request_timeout),
                headers={"User-Agent": self.config.user_agent},
            )
            self._fetcher = Fetcher(self._session, self.config)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def crawl(self, sections: Sequence[SeedSection]) -> CrawlReport:
        """Run one full pass over *sections* and return what happened."""
        if self._fetcher is None:
            raise RuntimeError("Crawler used outside of 'async with'")
        report = CrawlReport()
        visited: Set[str] = set()
        logger.info("Crawl pass started: %d section(s)", len(sections))

        for section in sections:
            stack: List[CrawlTarget] = [CrawlTarget(section.name, section.url, 0)]
            while stack:
                target = stack.pop()
                if target.url in visited:
                    continue
                visited.add(target.url)

                links = await self._visit(target, report)
                await self._pause()

                if target.depth >= self.config.max_depth:
                    continue
                children = [
                    CrawlTarget(link.name or link.url, link.url, target.depth + 1)
                    for link in links
                    if link.url not in visited and link.url not in self.store
                ]
                # reversed so siblings pop in document order
                stack.extend(reversed(children))

        report.finished_at = datetime.now(timezone.utc)
        report.total = len(self.store)
        logger.info(
            "Crawl pass done: %d stored, %d failed in %.2f s (total %d)",
            len(report.fetched),
            len(report.failed),
            report.duration,
            report.total,
        )
        return report

    async def _visit(self, target: CrawlTarget, report: CrawlReport) -> List[LinkCandidate]:
        """Fetch, extract and store one target; failures abandon its subtree."""
        assert self._fetcher is not None
        try:
            page = await self._fetcher.fetch(target.url)
            parsed = parse_html(
                page,
                fallback_title=target.name,
                domain_prefix=self.config.domain_prefix,
                content_limit=self.config.content_limit,
            )
        except (FetchError, ExtractError) as exc:
            logger.warning("Failed to crawl %s: %s", target.url, exc.reason)
            report.failed.append(target.url)
            return []

        self.store.upsert(Document(url=target.url, title=parsed.title, content=parsed.text))
        report.fetched.append(target.url)
        logger.debug("Stored %s (depth %d, %d link(s))", target.url, target.depth, len(parsed.links))
        return parsed.links

    async def _pause(self) -> None:
        # unconditional, also after failures and the final item
        if self.config.crawl_delay > 0:
            await asyncio.sleep(self.config.crawl_delay)
