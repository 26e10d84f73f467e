"""Service layer."""

from citebot.services.citation_service import CitationPipeline, PipelineConfig
from citebot.services.errors import (
    CitebotError,
    FetchFailed,
    NoAuthorsFound,
    ParseFailed,
    RateLimited,
)
from citebot.services.fetcher import PageFetcher
from citebot.services.markdown_service import parse_markdown_papers
from citebot.services.scholar_service import ScholarResult, ScholarService

__all__ = [
    "CitationPipeline",
    "CitebotError",
    "FetchFailed",
    "NoAuthorsFound",
    "PageFetcher",
    "ParseFailed",
    "PipelineConfig",
    "RateLimited",
    "ScholarResult",
    "ScholarService",
    "parse_markdown_papers",
]
