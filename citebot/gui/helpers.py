"""Shared helper functions for the web view: pagination and text display."""

import re
from datetime import datetime
from typing import Optional

from markupsafe import Markup, escape

from citebot.models.paper import Paper


def parse_page(value: Optional[str]) -> int:
    """Page number from a query string value; anything invalid is page 1."""
    try:
        page = int(value) if value else 1
    except ValueError:
        return 1
    return page if page > 0 else 1


def total_pages(total: int, page_size: int) -> int:
    """Number of pages needed for *total* rows (at least 1)."""
    if page_size <= 0:
        return 1
    return max(1, (total + page_size - 1) // page_size)


def first_sentence(text: Optional[str]) -> str:
    """First sentence of an abstract, ending with a period."""
    if not text:
        return ""
    head = text.split(".", 1)[0].strip()
    return f"{head}." if head else ""


def highlight(text: Optional[str], query: str) -> Markup:
    """HTML-escape *text* and wrap case-insensitive matches of *query*."""
    text = text or ""
    query = query.strip()
    if not query:
        return escape(text)

    # Match on the raw text so entities like &amp; are never split
    parts = []
    last = 0
    for match in re.finditer(re.escape(query), text, re.IGNORECASE):
        parts.append(escape(text[last:match.start()]))
        parts.append(Markup('<mark class="highlight">%s</mark>') % match.group(0))
        last = match.end()
    parts.append(escape(text[last:]))
    return Markup("").join(parts)


def format_timestamp(value: Optional[str]) -> str:
    """Format an ISO timestamp as 'Jan 02, 2006 15:04' style."""
    if not value:
        return ""
    try:
        dt = datetime.fromisoformat(value)
    except ValueError:
        return value
    return dt.strftime("%b %d, %Y %H:%M")


def paper_to_dict(paper: Paper) -> dict:
    """JSON-ready view of a paper (unknown citations are null)."""
    return {
        "title": paper.title,
        "url": paper.url,
        "arxivAbsUrl": paper.arxiv_abs_url or "",
        "googleScholarUrl": paper.scholar_url or "",
        "abstract": paper.abstract or "",
        "firstSentence": first_sentence(paper.abstract),
        "citations": paper.citations.value,
        "lastUpdate": format_timestamp(paper.updated_at),
    }
