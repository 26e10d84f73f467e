import pytest

from citebot.utils.urls import (
    direct_scholar_url,
    extract_arxiv_id,
    is_acl_url,
    is_arxiv_pdf,
    is_arxiv_url,
    pdf_to_abstract_url,
)

URLS = [
    "https://arxiv.org/abs/1706.03762",
    "https://arxiv.org/abs/2401.01234v2",
    "https://arxiv.org/pdf/1706.03762",
    "https://arxiv.org/pdf/1706.03762v5.pdf",
    "https://aclanthology.org/2024.acl-long.245/",
    "https://openreview.net/forum?id=abc",
    "",
]


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://arxiv.org/pdf/1706.03762", "https://arxiv.org/abs/1706.03762"),
        ("https://arxiv.org/pdf/1706.03762v5.pdf", "https://arxiv.org/abs/1706.03762v5"),
        ("https://arxiv.org/abs/1706.03762", "https://arxiv.org/abs/1706.03762"),
        ("https://example.com/pdf/paper.pdf", "https://example.com/pdf/paper.pdf"),
    ],
)
def test_pdf_to_abstract_url(url, expected):
    assert pdf_to_abstract_url(url) == expected


@pytest.mark.parametrize("url", URLS)
def test_pdf_to_abstract_url_is_idempotent(url):
    once = pdf_to_abstract_url(url)
    assert pdf_to_abstract_url(once) == once
    if is_arxiv_pdf(url):
        assert "/abs/" in once
        assert not once.endswith(".pdf")


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://arxiv.org/abs/1706.03762", "1706.03762"),
        ("https://arxiv.org/abs/2401.01234v2", "2401.01234v2"),
        ("https://arxiv.org/pdf/1706.03762v5.pdf", "1706.03762v5"),
        ("https://aclanthology.org/2024.acl-long.245/", None),
        ("https://arxiv.org/list/cs.CL/recent", None),
        ("not a url", None),
    ],
)
def test_extract_arxiv_id(url, expected):
    assert extract_arxiv_id(url) == expected


@pytest.mark.parametrize("url", URLS)
def test_predicates_are_consistent(url):
    if is_arxiv_pdf(url):
        assert is_arxiv_url(url)
    assert not (is_acl_url(url) and is_arxiv_url(url))


def test_classifier_examples():
    assert is_arxiv_url("https://arxiv.org/abs/1706.03762")
    assert not is_arxiv_pdf("https://arxiv.org/abs/1706.03762")
    assert is_arxiv_pdf("https://arxiv.org/pdf/1706.03762")
    assert is_acl_url("https://aclanthology.org/2024.acl-long.245/")
    assert not is_acl_url("https://arxiv.org/abs/1706.03762")


def test_direct_scholar_url():
    assert direct_scholar_url("1706.03762") == "https://scholar.google.com/scholar?q=arxiv:1706.03762"
