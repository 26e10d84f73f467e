"""Paper data model."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class CitationCount:
    """Citation count that is either unknown or a known non-negative integer.

    ``value is None`` means *unknown* (the page could not be fetched or
    parsed).  ``value == 0`` is an authoritative zero.  The two are never
    interchangeable.
    """

    value: Optional[int] = None

    def __post_init__(self) -> None:
        if self.value is not None and self.value < 0:
            raise ValueError(f"Citation count must be >= 0, got {self.value}")

    @classmethod
    def known(cls, value: int) -> "CitationCount":
        return cls(int(value))

    @property
    def is_known(self) -> bool:
        return self.value is not None

    def merge(self, other: "CitationCount") -> "CitationCount":
        """Return *other* unless it would replace a known count with unknown."""
        if other.is_known or not self.is_known:
            return other
        return self

    def sort_key(self) -> tuple[int, int]:
        """Known counts first, highest first; unknown counts last."""
        if self.value is None:
            return (1, 0)
        return (0, -self.value)

    def __str__(self) -> str:
        return "N/A" if self.value is None else str(self.value)


UNKNOWN = CitationCount()


@dataclass
class Paper:
    """A bibliography entry and everything resolved about it."""

    title: str
    url: str
    arxiv_abs_url: Optional[str] = None
    scholar_url: Optional[str] = None
    abstract: Optional[str] = None
    citations: CitationCount = UNKNOWN

    # Search refinement only, never persisted
    authors: list[str] = field(default_factory=list)

    # Set by the cache
    updated_at: Optional[str] = None


def sort_by_citations(papers: list[Paper]) -> list[Paper]:
    """Return papers ordered by citation count, unknown counts last.

    The sort is stable, so papers with equal (or unknown) counts keep their
    input order.
    """
    return sorted(papers, key=lambda p: p.citations.sort_key())
