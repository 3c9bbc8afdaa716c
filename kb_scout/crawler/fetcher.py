# kb_scout/crawler/fetcher.py
"""
Fetcher module: a single bounded-time HTTP GET per URL, no retry.
"""
from __future__ import annotations

import asyncio

from aiohttp import ClientError, ClientSession, ClientTimeout
from kb_scout.config import KnowledgeConfig
from kb_scout.crawler.models import PageData
from kb_scout.errors import FetchError
from kb_scout.logger import logger


class Fetcher:
    """Fetches one URL within ``config.request_timeout`` seconds."""

    def __init__(self, session: ClientSession, config: KnowledgeConfig) -> None:
        self.session = session
        self.config = config
        self._timeout = ClientTimeout(total=config.request_timeout)

    async def fetch(self, url: str) -> PageData:
        """
        Return the response body and content type of *url*.

        Raises FetchError on timeout, network error, a non-2xx status or a URL
        that cannot be encoded (e.g. a host label longer than 63 characters).
        """
        try:
            async with self.session.get(url, timeout=self._timeout, raise_for_status=False) as resp:
                if not 200 <= resp.status < 300:
                    raise FetchError(url, f"HTTP {resp.status}")
                ctype = resp.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
                if "html" in ctype or "xml" in ctype or ctype.startswith("text/"):
                    text = await resp.text(errors="replace")
                    logger.debug("Fetched %s (%s, %d chars)", url, ctype, len(text))
                    return PageData(url, text, ctype)
                data = await resp.read()
                logger.debug("Fetched %s (%s, %d bytes)", url, ctype or "unknown", len(data))
                return PageData(url, data, ctype)
        except asyncio.TimeoutError as exc:
            raise FetchError(url, f"timed out after {self.config.request_timeout:g}s") from exc
        except ClientError as exc:
            raise FetchError(url, str(exc) or type(exc).__name__) from exc
        except ValueError as exc:
            # yarl/idna raise UnicodeError (a ValueError) for unencodable hosts
            raise FetchError(url, f"invalid URL: {exc}") from exc
