from __future__ import annotations

import logging
from typing import Dict, Union

import pytest
import requests

from citebot.config import Settings
from citebot.database.repository import CitationCache
from citebot.services.fetcher import PageFetcher
from citebot.services.scholar_service import ScholarService


class MockResponse:
    def __init__(self, *, status_code: int = 200, text: str = ""):
        self.status_code = status_code
        self.text = text


class MockSession:
    """Stands in for ``requests.Session``; routes GETs by exact URL.

    A value may be a MockResponse, a plain HTML string (200), or an
    exception instance to raise.
    """

    def __init__(self, responses: Dict[str, Union[MockResponse, str, Exception]]):
        self.responses = dict(responses)
        self.calls: list[str] = []
        self.closed = False

    def get(self, url, **kwargs):
        self.calls.append(url)
        if url not in self.responses:
            raise AssertionError(f"Unexpected request: {url}")
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        if isinstance(response, str):
            return MockResponse(text=response)
        return response

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def isolated_settings():
    Settings.reset()
    yield
    Settings.reset()


@pytest.fixture(autouse=True)
def restore_citebot_logger():
    log = logging.getLogger("citebot")
    handlers, level, propagate = list(log.handlers), log.level, log.propagate
    yield
    log.handlers[:] = handlers
    log.setLevel(level)
    log.propagate = propagate


@pytest.fixture
def make_fetcher():
    def _make(responses) -> tuple[PageFetcher, MockSession]:
        session = MockSession(responses)
        return PageFetcher(session=session, timeout=1), session

    return _make


@pytest.fixture
def make_scholar(make_fetcher):
    def _make(responses) -> tuple[ScholarService, MockSession]:
        fetcher, session = make_fetcher(responses)
        return ScholarService(fetcher), session

    return _make


@pytest.fixture
def cache(tmp_path):
    c = CitationCache(tmp_path / "cache.db")
    yield c
    c.close()


ARXIV_ABS_HTML = """
<html><body>
  <h1 class="title mathjax">Attention Is All You Need</h1>
  <blockquote class="abstract mathjax">
    <span class="descriptor">Abstract:</span>
    The dominant sequence transduction models are based on complex
    recurrent or convolutional neural networks.
  </blockquote>
  <div class="extra-ref-cite">
    <a class="abs-button abs-button-small cite-google-scholar"
       href="https://scholar.google.com/scholar_lookup?arxiv_id=1706.03762">Google Scholar</a>
  </div>
</body></html>
"""

ACL_HTML = """
<html><body>
  <h2 id="title"><a href="/2024.acl-long.245.pdf">Graph Language Models</a></h2>
  <p class="lead">
    <a href="/people/m/moritz-plenz/">Moritz Plenz</a>,
    <a href="/people/a/anette-frank/">Anette Frank</a>
  </p>
  <div class="card-body p-3 small acl-abstract">
    <h5 class="card-title">Abstract</h5>
    <span>While language models have become the backbone of NLP, graphs remain hard.</span>
  </div>
  <a class="btn" href="https://scholar.google.com/scholar?q=Graph+Language+Models">Google Scholar</a>
</body></html>
"""

SCHOLAR_CITED_HTML = """
<html><body>
  <div class="gs_r"><div class="gs_ri">
    <h3 class="gs_rt"><a href="https://example.com/paper">Graph Language Models</a></h3>
    <div class="gs_fl"><a href="#">Save</a><a href="/scholar?cites=1">Cited by 7</a></div>
  </div></div>
</body></html>
"""

SCHOLAR_CITE_ONLY_HTML = """
<html><body>
  <div class="gs_or_cit"><span>Cite</span></div>
</body></html>
"""

RATE_LIMITED = MockResponse(status_code=429, text="Too Many Requests")


def session_error() -> requests.ConnectionError:
    return requests.ConnectionError("connection refused")
