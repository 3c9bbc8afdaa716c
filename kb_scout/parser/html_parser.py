# === FILE: kb_scout/parser/html_parser.py ===
"""HTML extraction for indexed pages.

:func:`parse_html` turns a fetched page into the three things the crawler
needs:

* title — first ``<title>`` text, or the caller's fallback when absent/empty.
* text  — visible body text, whitespace collapsed, cut to ``content_limit``.
* links — anchors whose ``href`` starts with the crawl-domain prefix, in
  document order, one entry per URL. The anchor text travels with each link
  and becomes the title fallback of the page it points to.

Broken or partial markup is parsed best-effort. Only content that cannot be
treated as markup at all raises :class:`~kb_scout.errors.ExtractError`.
"""
from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from bs4 import BeautifulSoup
from bs4.element import Tag

from kb_scout.crawler.models import PageData
from kb_scout.errors import ExtractError

__all__: Sequence[str] = ("LinkCandidate", "ParsedPage", "parse_html", "collapse_whitespace")

_WS_RE = re.compile(r"\s+")
_INVISIBLE = ["script", "style", "noscript", "template"]


@dataclass(frozen=True, slots=True)
class LinkCandidate:
    """Outbound link plus the anchor text offered as a title fallback."""

    name: str
    url: str


@dataclass(slots=True)
class ParsedPage:
    """Lightweight representation of an extracted HTML page."""

    url: str
    title: str
    text: str
    links: list[LinkCandidate] = field(default_factory=list)


def collapse_whitespace(text: str) -> str:
    """Replace every whitespace run with one space and trim the ends."""
    return _WS_RE.sub(" ", text).strip()


def _decode(page: PageData) -> str:
    content = page.content
    if isinstance(content, str):
        return content
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ExtractError(page.url, f"binary content ({page.content_type or 'unknown type'})") from exc


def _extract_links(soup: BeautifulSoup, domain_prefix: str) -> list[LinkCandidate]:
    seen: set[str] = set()
    links: list[LinkCandidate] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href = tag.get("href")
        if not isinstance(href, str):
            continue
        href = href.strip()
        if not href.startswith(domain_prefix) or href in seen:
            continue
        seen.add(href)
        links.append(LinkCandidate(name=collapse_whitespace(tag.get_text(" ")), url=href))
    return links


def _visible_text(soup: BeautifulSoup) -> str:
    for element in soup(_INVISIBLE):
        element.decompose()
    root = soup.body
    if root is None:
        for element in soup(["head", "title"]):
            element.decompose()
        root = soup
    return collapse_whitespace(root.get_text(" "))


def parse_html(
    page: PageData,
    *,
    fallback_title: str,
    domain_prefix: str,
    content_limit: int = 1000,
) -> ParsedPage:
    """Extract title, bounded body text and same-domain links from *page*."""
    html = _decode(page)
    try:
        soup = BeautifulSoup(html, "html.parser")
    except Exception as exc:  # html.parser raises assorted errors on hostile input
        raise ExtractError(page.url, f"unparsable markup: {exc}") from exc

    title_tag = soup.find("title")
    title = collapse_whitespace(title_tag.get_text()) if title_tag else ""

    # before _visible_text, which mutates the tree
    links = _extract_links(soup, domain_prefix)
    text = _visible_text(soup)[:content_limit]

    return ParsedPage(url=page.url, title=title or fallback_title, text=text, links=links)
