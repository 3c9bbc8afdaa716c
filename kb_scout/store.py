"""In-memory document store keyed by canonical URL."""
from __future__ import annotations

from typing import Dict, Iterator, List, Optional

from kb_scout.crawler.models import Document

__all__ = ["DocumentStore"]


class DocumentStore:
    """
    Mapping ``url -> Document``.

    Iteration follows insertion order; overwriting a URL keeps its original
    position. Entries are only ever added or replaced, never removed.
    """

    def __init__(self) -> None:
        self._docs: Dict[str, Document] = {}

    def upsert(self, doc: Document) -> None:
        self._docs[doc.url] = doc

    def get(self, url: str) -> Optional[Document]:
        return self._docs.get(url)

    def urls(self) -> List[str]:
        return list(self._docs)

    def __contains__(self, url: object) -> bool:
        return url in self._docs

    def __len__(self) -> int:
        return len(self._docs)

    def __iter__(self) -> Iterator[Document]:
        # snapshot, so a crawl writing mid-iteration cannot break readers
        return iter(list(self._docs.values()))
