"""
Data models for the KBScout crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Union


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class PageData:
    """Raw response of a fetched page (text or binary) and its content type."""

    url: str
    content: Union[str, bytes]
    content_type: str = ""


@dataclass(frozen=True, slots=True)
class Document:
    """One indexed page. Immutable, so a stored value is never seen half-written."""

    url: str
    title: str
    content: str
    crawled_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True, slots=True)
class CrawlTarget:
    """Pending frontier entry: the name doubles as title fallback."""

    name: str
    url: str
    depth: int


@dataclass(slots=True)
class CrawlReport:
    """Outcome of one full crawl pass."""

    started_at: datetime = field(default_factory=_utcnow)
    finished_at: Optional[datetime] = None
    fetched: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    total: int = 0

    @property
    def duration(self) -> float:
        if self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()

    def as_dict(self) -> dict:
        return {
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "fetched": len(self.fetched),
            "failed": len(self.failed),
            "total": self.total,
        }
