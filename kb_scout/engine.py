# File: kb_scout/engine.py
"""kb_scout.engine: facade that owns the store, the search index and the crawl schedule."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Sequence

from kb_scout.config import KnowledgeConfig, SeedSection
from kb_scout.crawler.crawler import KnowledgeCrawler
from kb_scout.crawler.fetcher import Fetcher
from kb_scout.crawler.models import CrawlReport
from kb_scout.errors import PassFailure
from kb_scout.logger import logger
from kb_scout.scheduler import CrawlScheduler
from kb_scout.search import SearchHit, SearchIndex, build_context
from kb_scout.store import DocumentStore

__all__ = ["Engine"]


class Engine:
    """Facade for the CLI, the web app and tests: one isolated knowledge index per instance."""

    def __init__(self, config: KnowledgeConfig, fetcher: Optional[Fetcher] = None) -> None:
        """*fetcher* replaces the aiohttp-backed one, e.g. with a stub in tests."""
        self.config = config
        self.store = DocumentStore()
        self.index = SearchIndex(self.store, excerpt_length=config.excerpt_length)
        self.scheduler = CrawlScheduler(
            self.run_pass, config.crawl_interval, run_on_start=config.crawl_on_startup
        )
        self.last_crawled: Optional[datetime] = None
        self._fetcher = fetcher

    # -- crawling ---------------------------------------------------------

    async def run_pass(self, sections: Optional[Sequence[SeedSection]] = None) -> CrawlReport:
        """
        Crawl *sections* (all configured ones by default) once.

        Only a successful pass over the full configured list moves
        ``last_crawled``. Anything unexpected becomes PassFailure; documents
        stored so far stay in place.
        """
        full = sections is None
        targets = list(self.config.sections) if full else list(sections)
        logger.info("Starting crawl…")
        try:
            async with KnowledgeCrawler(self.config, self.store, self._fetcher) as crawler:
                report = await crawler.crawl(targets)
        except Exception as exc:
            logger.error("Crawl pass failed: %s", exc)
            raise PassFailure(f"crawl pass failed: {exc}") from exc

        if full:
            self.last_crawled = report.finished_at
        logger.info("Crawl done. Total: %d", report.total)
        return report

    async def crawl(self, sections: Optional[Sequence[SeedSection]] = None) -> CrawlReport:
        """Manual trigger: waits for any pass in flight, then runs its own."""
        return await self.scheduler.trigger(sections)

    def start(self) -> None:
        self.scheduler.start()

    async def stop(self) -> None:
        await self.scheduler.stop()

    # -- lookups ------------------------------------------------------------

    def search(self, query: str, limit: Optional[int] = None) -> List[SearchHit]:
        return self.index.search(query, self.config.search_limit if limit is None else limit)

    def context_for(self, message: str) -> tuple[str, List[SearchHit]]:
        """Context string for the completion service and the hits it was built from."""
        hits = self.index.search(message, self.config.context_limit)
        return build_context(hits, self.config.context_header), hits

    def stats(self) -> Dict[str, object]:
        return {
            "totalArticles": len(self.store),
            "lastScraped": self.last_crawled.isoformat() if self.last_crawled else None,
        }
