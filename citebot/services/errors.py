"""Exceptions raised while resolving citations.

Only :class:`RateLimited` is meant to reach the top of a run.  The others
make the current extraction step come back empty so the pipeline can move
on to its next fallback.
"""

from typing import Optional


class CitebotError(Exception):
    """Base class for citebot errors."""


class RateLimited(CitebotError):
    """The remote host answered HTTP 429.  Retrying right away makes it worse."""

    def __init__(self, host: str):
        self.host = host
        super().__init__(
            f"Rate limited by {host}. Please wait a few minutes before trying again."
        )


class FetchFailed(CitebotError):
    """Non-2xx status or network-level failure."""

    def __init__(
        self,
        url: str,
        status: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ):
        self.url = url
        self.status = status
        self.cause = cause
        if status is not None:
            reason = f"HTTP {status}"
        else:
            reason = str(cause) if cause else "unknown error"
        super().__init__(f"Failed to fetch {url}: {reason}")


class ParseFailed(CitebotError):
    """The page body could not be turned into a document."""

    def __init__(self, url: str, cause: Optional[BaseException] = None):
        self.url = url
        self.cause = cause
        super().__init__(f"Failed to parse {url}: {cause}")


class NoAuthorsFound(CitebotError):
    """ACL page without an author list.

    Carries the abstract that was found on the same page, if any.
    """

    def __init__(self, abstract: Optional[str] = None):
        self.abstract = abstract
        super().__init__("No authors found on ACL page")
