"""Utility functions."""

from citebot.utils.text import authors_from_title, normalize_title, split_author_title, titles_match
from citebot.utils.urls import (
    extract_arxiv_id,
    is_acl_url,
    is_arxiv_pdf,
    is_arxiv_url,
    pdf_to_abstract_url,
)

__all__ = [
    "authors_from_title",
    "extract_arxiv_id",
    "is_acl_url",
    "is_arxiv_pdf",
    "is_arxiv_url",
    "normalize_title",
    "pdf_to_abstract_url",
    "split_author_title",
    "titles_match",
]
