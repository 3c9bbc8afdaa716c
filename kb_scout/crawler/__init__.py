"""Crawl subsystem: fetching, traversal and the data passed between them."""
from kb_scout.crawler.crawler import KnowledgeCrawler
from kb_scout.crawler.fetcher import Fetcher
from kb_scout.crawler.models import CrawlReport, CrawlTarget, Document, PageData

__all__ = ["KnowledgeCrawler", "Fetcher", "CrawlReport", "CrawlTarget", "Document", "PageData"]
