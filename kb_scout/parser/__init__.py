"""HTML parsing for KBScout."""
from kb_scout.parser.html_parser import LinkCandidate, ParsedPage, collapse_whitespace, parse_html

__all__ = ["LinkCandidate", "ParsedPage", "collapse_whitespace", "parse_html"]
