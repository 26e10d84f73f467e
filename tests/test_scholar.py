from bs4 import BeautifulSoup

from citebot.models.paper import UNKNOWN, CitationCount
from citebot.services.scholar_service import (
    LinkStrategy,
    build_search_url,
    extract_citation_count,
    resolve_scholar_link,
)

from conftest import (
    ACL_HTML,
    ARXIV_ABS_HTML,
    SCHOLAR_CITE_ONLY_HTML,
    SCHOLAR_CITED_HTML,
    MockResponse,
)


def soup(html):
    return BeautifulSoup(html, "html.parser")


# Citation counts

def test_cited_by_count():
    assert extract_citation_count(soup(SCHOLAR_CITED_HTML)) == CitationCount.known(7)


def test_cite_button_only_means_zero():
    assert extract_citation_count(soup(SCHOLAR_CITE_ONLY_HTML)) == CitationCount.known(0)


def test_no_citation_markup_is_unknown():
    assert extract_citation_count(soup("<html><body><p>hi</p></body></html>")) == UNKNOWN


def test_cited_by_wins_over_cite_button():
    html = SCHOLAR_CITE_ONLY_HTML.replace(
        "</body>", '<div class="gs_fl"><a>Cited by 12</a></div></body>'
    )
    assert extract_citation_count(soup(html)) == CitationCount.known(12)


# Link resolution

def test_acl_page_link():
    link = resolve_scholar_link(soup(ACL_HTML), "https://aclanthology.org/2024.acl-long.245/")
    assert link == "https://scholar.google.com/scholar?q=Graph+Language+Models"


def test_arxiv_page_link():
    link = resolve_scholar_link(soup(ARXIV_ABS_HTML), "https://arxiv.org/abs/1706.03762")
    assert link == "https://scholar.google.com/scholar_lookup?arxiv_id=1706.03762"


def test_legacy_gs_anchor():
    html = '<a class="gs" href="https://scholar.google.de/scholar?q=x">GS</a>'
    assert resolve_scholar_link(soup(html), "https://example.com") == "https://scholar.google.de/scholar?q=x"


def test_arxiv_id_fallback():
    link = resolve_scholar_link(soup("<html></html>"), "https://arxiv.org/abs/1706.03762v5")
    assert link == "https://scholar.google.com/scholar?q=arxiv:1706.03762v5"


def test_no_link_for_other_pages():
    assert resolve_scholar_link(soup("<html></html>"), "https://example.com/paper") is None


def test_custom_strategies():
    html = '<a class="scholar" href="https://s.example/x">S</a>'
    strategies = (LinkStrategy("custom", "a.scholar"),)
    assert resolve_scholar_link(soup(html), "https://example.com", strategies) == "https://s.example/x"


# Search

def test_build_search_url_with_author():
    url = build_search_url("Some Paper", ["Smith, J."])
    assert url.startswith("https://scholar.google.com/scholar?q=")
    assert "%22Some+Paper%22" in url
    assert "author%3A%22Smith%2C+J.%22" in url


def test_build_search_url_without_author():
    assert "author" not in build_search_url("Some Paper")


def test_search_match(make_scholar):
    url = build_search_url("Graph Language Models", ["Moritz Plenz"])
    scholar, _ = make_scholar({url: SCHOLAR_CITED_HTML})
    result = scholar.search("Graph Language Models", ["Moritz Plenz"])
    assert result.matched
    assert result.citations == CitationCount.known(7)
    assert result.url == "https://example.com/paper"


def test_search_snippet_becomes_abstract(make_scholar):
    html = SCHOLAR_CITED_HTML.replace(
        '<div class="gs_fl">', '<div class="gs_rs">A   short\nsnippet.</div><div class="gs_fl">'
    )
    url = build_search_url("Graph Language Models")
    scholar, _ = make_scholar({url: html})
    assert scholar.search("Graph Language Models").abstract == "A short snippet."


def test_search_without_match(make_scholar):
    url = build_search_url("Something Else Entirely")
    scholar, _ = make_scholar({url: SCHOLAR_CITED_HTML})
    result = scholar.search("Something Else Entirely")
    assert not result.matched
    assert result.citations == UNKNOWN
    assert result.url == url


def test_search_fetches_entry_when_count_missing(make_scholar):
    html = """
    <div class="gs_ri">
      <h3 class="gs_rt"><a href="https://scholar.google.com/entry">Graph Language Models</a></h3>
    </div>
    """
    url = build_search_url("Graph Language Models")
    scholar, session = make_scholar(
        {url: html, "https://scholar.google.com/entry": SCHOLAR_CITE_ONLY_HTML}
    )
    result = scholar.search("Graph Language Models")
    assert result.citations == CitationCount.known(0)
    assert session.calls == [url, "https://scholar.google.com/entry"]


def test_search_failure_is_unknown(make_scholar):
    url = build_search_url("Graph Language Models")
    scholar, _ = make_scholar({url: MockResponse(status_code=503)})
    result = scholar.search("Graph Language Models")
    assert not result.matched
    assert result.citations == UNKNOWN


def test_fetch_citations_failure_is_unknown(make_scholar):
    scholar, _ = make_scholar({"https://scholar.google.com/x": MockResponse(status_code=404)})
    assert scholar.fetch_citations("https://scholar.google.com/x") == UNKNOWN
