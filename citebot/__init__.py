"""citebot - Markdown bibliography to citation report.

Reads paper links from a markdown file, resolves citation counts from
arXiv, ACL Anthology and Google Scholar pages, caches them in SQLite and
reports them sorted by citation count.
"""

__version__ = "1.0.0"

from citebot.config import Settings
from citebot.models.paper import CitationCount, Paper

__all__ = ["CitationCount", "Paper", "Settings", "__version__"]
