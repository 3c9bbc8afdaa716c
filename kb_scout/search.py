# File: kb_scout/search.py
"""kb_scout.search: substring lookup over the document store and context assembly."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, List, Sequence

from kb_scout.store import DocumentStore

__all__: Sequence[str] = ("SearchHit", "SearchIndex", "build_context")

ELLIPSIS = "..."


@dataclass(frozen=True, slots=True)
class SearchHit:
    """Title, short excerpt and source URL of a matching document."""

    title: str
    excerpt: str
    url: str

    def as_dict(self) -> Dict[str, str]:
        return asdict(self)


class SearchIndex:
    """
    Read-only view over a DocumentStore.

    A document matches when the query is a case-insensitive substring of its
    title or content. Results keep store order and stop at *limit*: the first
    matches win, there is no scoring. The empty string is a substring of
    everything, so an empty query matches every document.
    """

    def __init__(self, store: DocumentStore, excerpt_length: int = 200) -> None:
        self.store = store
        self.excerpt_length = excerpt_length

    def search(self, query: str, limit: int = 3) -> List[SearchHit]:
        if limit <= 0:
            return []
        needle = query.lower()
        hits: List[SearchHit] = []
        for doc in self.store:
            if needle in doc.title.lower() or needle in doc.content.lower():
                hits.append(
                    SearchHit(
                        title=doc.title,
                        excerpt=doc.content[: self.excerpt_length] + ELLIPSIS,
                        url=doc.url,
                    )
                )
                if len(hits) >= limit:
                    break
        return hits


def build_context(hits: Sequence[SearchHit], header: str) -> str:
    """Render hits as the numbered context block handed to the completion service."""
    if not hits:
        return ""
    parts = [f"{header}\n\n"]
    for i, hit in enumerate(hits, start=1):
        parts.append(f"{i}. {hit.title}\n{hit.excerpt}\nSource: {hit.url}\n\n")
    return "".join(parts)
