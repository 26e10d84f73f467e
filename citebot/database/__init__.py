"""Persistence layer."""

from citebot.database.repository import CitationCache

__all__ = ["CitationCache"]
