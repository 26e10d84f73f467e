"""Data models."""

from citebot.models.paper import UNKNOWN, CitationCount, Paper, sort_by_citations

__all__ = ["UNKNOWN", "CitationCount", "Paper", "sort_by_citations"]
