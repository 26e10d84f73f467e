"""Google Scholar link resolution, search and citation-count extraction.

Selector patterns below describe the page layouts observed when this was
written.  They are plain data so that a new layout only needs a new entry.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Sequence
from urllib.parse import urlencode

from bs4 import BeautifulSoup, Tag

from citebot.models.paper import UNKNOWN, CitationCount
from citebot.services.errors import FetchFailed, ParseFailed
from citebot.services.fetcher import PageFetcher
from citebot.utils.text import collapse_whitespace, titles_match
from citebot.utils.urls import SCHOLAR_BASE, direct_scholar_url, extract_arxiv_id, is_arxiv_url

SCHOLAR_SEARCH_URL = SCHOLAR_BASE

# Scholar result markup
RESULT_SELECTOR = ".gs_ri"
RESULT_TITLE_SELECTOR = ".gs_rt"
RESULT_LINK_SELECTOR = ".gs_rt a[href]"
SNIPPET_SELECTORS: tuple[str, ...] = (".gs_fma_snp", ".gs_rs")
CITED_BY_SELECTOR = ".gs_fl a"
CITE_BUTTON_SELECTOR = ".gs_or_cit"

_CITED_BY_RE = re.compile(r"^Cited by\s+(\d+)")


@dataclass(frozen=True)
class LinkStrategy:
    """One way of finding an embedded Google Scholar link on a page."""

    name: str
    selector: str

    def extract(self, doc: BeautifulSoup) -> Optional[str]:
        for link in doc.select(self.selector):
            href = (link.get("href") or "").strip()
            if href:
                return href
        return None


# Order reflects how reliably each pattern has worked, first match wins
SCHOLAR_LINK_STRATEGIES: tuple[LinkStrategy, ...] = (
    LinkStrategy("acl-anthology", "a[href*='scholar.google.com']"),
    LinkStrategy("arxiv-legacy", "a.gs"),
    LinkStrategy("arxiv", "a[href*='scholar.google']"),
)


@dataclass
class ScholarResult:
    """Outcome of a Scholar title search.

    ``matched`` is False when no result entry matched the title; ``url`` is
    then the search URL itself.
    """

    url: str
    citations: CitationCount = UNKNOWN
    abstract: Optional[str] = None
    matched: bool = False


def resolve_scholar_link(
    doc: BeautifulSoup,
    original_url: str,
    strategies: Sequence[LinkStrategy] = SCHOLAR_LINK_STRATEGIES,
) -> Optional[str]:
    """Find the Google Scholar URL for an already fetched paper page.

    Embedded links are tried first, in *strategies* order.  For arXiv pages
    without one, a Scholar query on the arXiv identifier is built instead.
    Returns None when neither works.
    """
    for strategy in strategies:
        link = strategy.extract(doc)
        if link:
            return link

    if is_arxiv_url(original_url):
        arxiv_id = extract_arxiv_id(original_url)
        if arxiv_id:
            return direct_scholar_url(arxiv_id)
    return None


def extract_citation_count(node: Tag) -> CitationCount:
    """Read the citation count from a Scholar page or a single result entry.

    A "Cited by N" link gives N.  A "Cite" button with no "Cited by" link is
    taken as zero citations.  Neither present means the count is unknown.
    """
    for link in node.select(CITED_BY_SELECTOR):
        match = _CITED_BY_RE.match(collapse_whitespace(link.get_text(" ")))
        if match:
            return CitationCount.known(int(match.group(1)))

    for button in node.select(CITE_BUTTON_SELECTOR):
        span = button.find("span")
        if span is not None and span.get_text(strip=True) == "Cite":
            return CitationCount.known(0)

    return UNKNOWN


def build_search_url(
    title: str,
    authors: Sequence[str] = (),
    base_url: str = SCHOLAR_SEARCH_URL,
) -> str:
    """Scholar search URL for a quoted title, refined by the first author."""
    query = f'"{title}"'
    if authors:
        query = f'{query} author:"{authors[0]}"'
    return f"{base_url}?{urlencode({'q': query})}"


class ScholarService:
    """Talks to Google Scholar through a :class:`PageFetcher`."""

    def __init__(
        self,
        fetcher: PageFetcher,
        search_url: str = SCHOLAR_SEARCH_URL,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize Scholar service.

        Args:
            fetcher: Page fetcher used for every request
            search_url: Scholar search endpoint
            logger: Logger for tracing
        """
        self.fetcher = fetcher
        self.search_url = search_url
        self.log = logger or logging.getLogger(__name__)

    def fetch_citations(self, scholar_url: str) -> CitationCount:
        """Fetch a Scholar page and read its citation count.

        Fetch and parse failures give an unknown count.  ``RateLimited`` is
        not caught.
        """
        try:
            doc = self.fetcher.fetch(scholar_url)
        except (FetchFailed, ParseFailed) as e:
            self.log.debug("Could not read citations from %s: %s", scholar_url, e)
            return UNKNOWN
        return extract_citation_count(doc)

    def search(self, title: str, authors: Sequence[str] = ()) -> ScholarResult:
        """Search Scholar for *title* and read the first matching entry.

        Args:
            title: Paper title (searched as an exact phrase)
            authors: Optional author list; only the first is used

        Returns:
            ScholarResult.  Without a matching entry it holds the search URL
            and an unknown count.
        """
        search_url = build_search_url(title, authors, self.search_url)
        try:
            doc = self.fetcher.fetch(search_url)
        except (FetchFailed, ParseFailed) as e:
            self.log.warning("Scholar search failed for '%s': %s", title, e)
            return ScholarResult(url=search_url)

        entry = self._find_matching_entry(doc, title)
        if entry is None:
            self.log.debug("No Scholar result matched '%s'", title)
            return ScholarResult(url=search_url)

        citations = extract_citation_count(entry)
        abstract = self._extract_snippet(entry)
        entry_url = self._extract_entry_url(entry)

        if not citations.is_known and entry_url:
            citations = self.fetch_citations(entry_url)

        return ScholarResult(
            url=entry_url or search_url,
            citations=citations,
            abstract=abstract,
            matched=True,
        )

    @staticmethod
    def _find_matching_entry(doc: BeautifulSoup, title: str) -> Optional[Tag]:
        """First result entry whose title contains, or is contained in, *title*."""
        for entry in doc.select(RESULT_SELECTOR):
            title_node = entry.select_one(RESULT_TITLE_SELECTOR)
            if title_node is None:
                continue
            if titles_match(title_node.get_text(" "), title):
                return entry
        return None

    @staticmethod
    def _extract_snippet(entry: Tag) -> Optional[str]:
        for selector in SNIPPET_SELECTORS:
            node = entry.select_one(selector)
            if node is not None:
                text = collapse_whitespace(node.get_text(" "))
                if text:
                    return text
        return None

    @staticmethod
    def _extract_entry_url(entry: Tag) -> Optional[str]:
        link = entry.select_one(RESULT_LINK_SELECTOR)
        if link is None:
            return None
        return link["href"].strip() or None
