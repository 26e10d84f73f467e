"""Source URL classification for arXiv and ACL Anthology links."""

import re
from typing import Optional

ARXIV_DOMAIN = "arxiv.org"
ACL_DOMAIN = "aclanthology.org"
SCHOLAR_BASE = "https://scholar.google.com/scholar"

# arxiv.org/abs/2401.01234v2, arxiv.org/pdf/2401.01234
ARXIV_ID_RE = re.compile(r"arxiv\.org/(?:abs|pdf)/(\d+(?:\.\d+)*(?:v\d+)?)")


def is_arxiv_url(url: str) -> bool:
    return ARXIV_DOMAIN in url


def is_arxiv_pdf(url: str) -> bool:
    return f"{ARXIV_DOMAIN}/pdf" in url


def is_acl_url(url: str) -> bool:
    return ACL_DOMAIN in url


def pdf_to_abstract_url(url: str) -> str:
    """Turn ``arxiv.org/pdf/<id>[.pdf]`` into ``arxiv.org/abs/<id>``.

    Anything that is not an arXiv PDF link is returned unchanged.
    """
    if not is_arxiv_pdf(url):
        return url
    abs_url = url.replace("/pdf/", "/abs/", 1)
    if abs_url.endswith(".pdf"):
        abs_url = abs_url[: -len(".pdf")]
    return abs_url


def extract_arxiv_id(url: str) -> Optional[str]:
    """Return the arXiv identifier (with version suffix if present), or None."""
    match = ARXIV_ID_RE.search(url)
    return match.group(1) if match else None


def direct_scholar_url(arxiv_id: str) -> str:
    """Google Scholar lookup URL for an arXiv identifier."""
    return f"{SCHOLAR_BASE}?q=arxiv:{arxiv_id}"
