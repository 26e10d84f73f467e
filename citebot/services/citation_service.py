"""Citation pipeline: resolves one paper at a time, cache first.

For every paper the pipeline decides which page to fetch, where to find a
Google Scholar link, and how to fall back to a plain title search when the
direct route does not give a citation count.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Optional

from bs4 import BeautifulSoup

from citebot.database.repository import CitationCache
from citebot.models.paper import Paper
from citebot.services.abstract_service import extract_acl_info, extract_arxiv_abstract
from citebot.services.errors import FetchFailed, NoAuthorsFound, ParseFailed, RateLimited
from citebot.services.fetcher import PageFetcher
from citebot.services.scholar_service import ScholarService, resolve_scholar_link
from citebot.utils.text import split_author_title
from citebot.utils.urls import is_acl_url, is_arxiv_pdf, is_arxiv_url, pdf_to_abstract_url


@dataclass
class PipelineConfig:
    """Per-run options.

    Attributes:
        force_refresh: Ignore cached entries and resolve everything again
        delay: Seconds to wait between papers that need the network
        debug: Log every resolution step at INFO instead of DEBUG
    """

    force_refresh: bool = False
    delay: float = 2.0
    debug: bool = False


@dataclass
class _PageContext:
    """What the linked-page step learned, handed on to the search step."""

    fetched: bool = False
    doc: Optional[BeautifulSoup] = None
    authors: Optional[list[str]] = None


class CitationPipeline:
    """Resolves citation counts for bibliography entries."""

    def __init__(
        self,
        fetcher: PageFetcher,
        cache: CitationCache,
        scholar: Optional[ScholarService] = None,
        config: Optional[PipelineConfig] = None,
        logger: Optional[logging.Logger] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize pipeline.

        Args:
            fetcher: Page fetcher shared by every step
            cache: Citation cache consulted before and written after resolving
            scholar: Scholar service (built on *fetcher* if omitted)
            config: Run options
            logger: Logger for progress and failures
            sleep: Delay function, replaceable in tests
        """
        self.fetcher = fetcher
        self.cache = cache
        self.config = config or PipelineConfig()
        self.log = logger or logging.getLogger(__name__)
        self.scholar = scholar or ScholarService(fetcher, logger=self.log)
        self._sleep = sleep
        self.rate_limited: Optional[RateLimited] = None

    # ── Run over many papers ──────────────────────────────────────────

    def run(
        self,
        papers: Iterable[Paper],
        should_stop: Optional[Callable[[], bool]] = None,
    ) -> Iterator[Paper]:
        """Process *papers* in order and yield each one when it is done.

        Papers are never dropped: failures come back with an unknown count.
        After a rate limit no more network requests are made; the remaining
        papers are answered from the cache where possible.

        Args:
            papers: Papers to resolve
            should_stop: Checked between papers; True ends the run early
        """
        touched_network = False
        for paper in papers:
            if should_stop is not None and should_stop():
                self.log.info("Stopping before '%s'", paper.title)
                return

            cached = self._cached(paper)
            if cached is not None:
                yield cached
                continue

            if self.rate_limited is not None:
                self._trace("Skipping '%s': run is rate limited", paper.title)
                yield paper
                continue

            if touched_network and self.config.delay > 0:
                self._sleep(self.config.delay)
            touched_network = True

            yield self._resolve_and_store(paper)

    def process(self, paper: Paper) -> Paper:
        """Resolve a single paper, using the cache unless forced.

        Raises:
            RateLimited: When a remote host throttles us
        """
        cached = self._cached(paper)
        if cached is not None:
            return cached
        self.resolve(paper)
        self.cache.put(paper)
        return paper

    def _resolve_and_store(self, paper: Paper) -> Paper:
        try:
            self.resolve(paper)
        except RateLimited as e:
            self.rate_limited = e
            self.log.error("%s Stopping network activity for this run.", e)
            return paper
        except Exception:
            self.log.exception("Failed to resolve '%s' (%s)", paper.title, paper.url)
        self._store(paper)
        return paper

    def _cached(self, paper: Paper) -> Optional[Paper]:
        if self.config.force_refresh:
            return None
        try:
            cached = self.cache.get(paper.url)
        except Exception:
            self.log.exception("Error checking cache for '%s'", paper.url)
            return None
        if cached is None:
            return None
        self._trace("Using cached data for %s", paper.url)
        cached.title = paper.title
        return cached

    def _store(self, paper: Paper) -> None:
        try:
            self.cache.put(paper)
        except Exception:
            self.log.exception("Error caching data for '%s'", paper.url)

    # ── Single paper resolution ───────────────────────────────────────

    def resolve(self, paper: Paper) -> Paper:
        """Fill in abstract, Scholar URL and citation count for *paper*.

        Mutates and returns *paper*.  Only ``RateLimited`` escapes; every
        other failure leaves the affected field empty.
        """
        self.log.info("Processing: %s", paper.title)
        url = paper.url
        context = _PageContext()

        if (is_arxiv_url(url) and not is_arxiv_pdf(url)) or is_acl_url(url):
            if self._resolve_from_page(paper, context):
                return paper
            self._trace("Falling back to title search for '%s'", paper.title)
        else:
            self._trace("Using title search for '%s'", paper.title)

        self._resolve_by_search(paper, context)
        return paper

    def _resolve_from_page(self, paper: Paper, context: _PageContext) -> bool:
        """Follow the Scholar link embedded in the paper's own page.

        Returns True when nothing is left for the search step to do.
        """
        url = paper.url
        context.fetched = True
        try:
            context.doc = self.fetcher.fetch(url)
        except (FetchFailed, ParseFailed) as e:
            self.log.warning("Could not fetch %s: %s", url, e)
            return False

        acl = is_acl_url(url)
        if acl:
            try:
                info = extract_acl_info(context.doc)
            except NoAuthorsFound as e:
                self._trace("No authors on ACL page %s", url)
                self._keep_abstract(paper, e.abstract)
            else:
                context.authors = info.authors
                self._keep_abstract(paper, info.abstract)
        else:
            paper.arxiv_abs_url = url
            self._keep_abstract(paper, extract_arxiv_abstract(context.doc))

        scholar_url = resolve_scholar_link(context.doc, url)
        if not scholar_url:
            self._trace("No Scholar link on %s", url)
            return False

        paper.scholar_url = scholar_url
        paper.citations = paper.citations.merge(self.scholar.fetch_citations(scholar_url))
        self._trace("Citations via %s: %s", scholar_url, paper.citations)

        # An unknown count from an arXiv Scholar link is accepted as is
        return not acl or paper.citations.is_known

    def _resolve_by_search(self, paper: Paper, context: _PageContext) -> None:
        if is_arxiv_url(paper.url):
            paper.arxiv_abs_url = pdf_to_abstract_url(paper.url)
            # The abstract page is fetched at most once per paper
            if not context.fetched:
                self._load_arxiv_abstract(paper)

        title = paper.title
        authors = context.authors
        if not authors:
            authors, title = split_author_title(paper.title)
        paper.authors = list(authors)

        result = self.scholar.search(title, authors)
        self._keep_abstract(paper, result.abstract)
        paper.citations = paper.citations.merge(result.citations)
        if result.matched or not paper.scholar_url:
            paper.scholar_url = result.url
        self._trace("Search result for '%s': %s (%s)", title, paper.citations, result.url)

    def _load_arxiv_abstract(self, paper: Paper) -> None:
        abs_url = paper.arxiv_abs_url or pdf_to_abstract_url(paper.url)
        try:
            doc = self.fetcher.fetch(abs_url)
        except (FetchFailed, ParseFailed) as e:
            self.log.warning("Could not fetch arXiv abstract %s: %s", abs_url, e)
            return
        self._keep_abstract(paper, extract_arxiv_abstract(doc))

    @staticmethod
    def _keep_abstract(paper: Paper, abstract: Optional[str]) -> None:
        """Set the abstract unless one was already found."""
        if abstract and not paper.abstract:
            paper.abstract = abstract

    def _trace(self, msg: str, *args: object) -> None:
        level = logging.INFO if self.config.debug else logging.DEBUG
        self.log.log(level, msg, *args)
