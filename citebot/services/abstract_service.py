"""Abstract and author extraction from arXiv and ACL Anthology pages."""

from dataclasses import dataclass, field
from typing import Optional

from bs4 import BeautifulSoup

from citebot.services.errors import NoAuthorsFound
from citebot.utils.text import collapse_whitespace

# Tried in order; the first block found wins
ARXIV_ABSTRACT_SELECTORS: tuple[str, ...] = (
    "blockquote.abstract.mathjax",
    "blockquote.abstract",
)
ARXIV_DESCRIPTOR_SELECTOR = "span.descriptor"

ACL_ABSTRACT_SELECTOR = "div.card-body.acl-abstract span"
ACL_AUTHOR_SELECTOR = "p.lead a"


@dataclass
class AclInfo:
    """Abstract and author list scraped from an ACL Anthology page."""

    abstract: Optional[str] = None
    authors: list[str] = field(default_factory=list)


def extract_arxiv_abstract(doc: BeautifulSoup) -> Optional[str]:
    """Return the abstract text of an arXiv abstract page, or None.

    The "Abstract:" descriptor label inside the block is dropped.
    """
    for selector in ARXIV_ABSTRACT_SELECTORS:
        block = doc.select_one(selector)
        if block is None:
            continue
        for descriptor in block.select(ARXIV_DESCRIPTOR_SELECTOR):
            descriptor.decompose()
        text = collapse_whitespace(block.get_text(" "))
        return text or None
    return None


def extract_acl_info(doc: BeautifulSoup) -> AclInfo:
    """Extract abstract and authors from an ACL Anthology paper page.

    Raises:
        NoAuthorsFound: When the page has no author links.  The exception
            carries whatever abstract was found.
    """
    abstract = None
    block = doc.select_one(ACL_ABSTRACT_SELECTOR)
    if block is not None:
        abstract = collapse_whitespace(block.get_text(" ")) or None

    authors = []
    for link in doc.select(ACL_AUTHOR_SELECTOR):
        name = collapse_whitespace(link.get_text(" "))
        if name:
            authors.append(name)

    if not authors:
        raise NoAuthorsFound(abstract)
    return AclInfo(abstract=abstract, authors=authors)
