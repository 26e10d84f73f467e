"""Text helpers for title matching and author parsing."""

import re

# "Smith, J. and Doe, A. - Some Paper" → author segment / title
AUTHOR_TITLE_SEPARATOR = " - "

# Initials such as "J.", "J. R.", "J.-P."
_INITIALS_RE = re.compile(r"^(?:[A-Z]\.\s*-?\s*)+$")
_ET_AL_RE = re.compile(r"\bet\s+al\b\.?", re.IGNORECASE)
_AND_RE = re.compile(r"\s+(?:and|&)\s+", re.IGNORECASE)


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace and strip both ends."""
    return " ".join(text.split())


def normalize_title(title: str) -> str:
    """Lowercase, drop double quotes, normalise whitespace."""
    return collapse_whitespace(title.replace('"', "")).lower()


def titles_match(candidate: str, query: str) -> bool:
    """True when one normalised title contains the other.

    Search results are often truncated ("Attention is all you ...") or
    prefixed ("[PDF] ..."), so containment in either direction counts.
    Empty titles never match.
    """
    a = normalize_title(candidate)
    b = normalize_title(query)
    if not a or not b:
        return False
    return a in b or b in a


def parse_author_segment(segment: str) -> list[str]:
    """Split an author segment into names.

    ``"Lee et al."`` collapses to ``["Lee"]``.  Otherwise the segment is
    split on commas and "and"; bare initials are re-attached to the surname
    before them so that ``"Smith, J. and Doe, A."`` yields
    ``["Smith, J.", "Doe, A."]``.
    """
    segment = segment.strip()
    if not segment:
        return []

    et_al = _ET_AL_RE.search(segment)
    if et_al:
        first = segment[: et_al.start()].strip().rstrip(",").strip()
        return [first] if first else []

    tokens = []
    for part in _AND_RE.sub(",", segment).split(","):
        part = part.strip()
        if part.lower().startswith("and "):
            part = part[4:].strip()
        if part:
            tokens.append(part)

    authors: list[str] = []
    for token in tokens:
        if authors and _INITIALS_RE.match(token):
            authors[-1] = f"{authors[-1]}, {token}"
        else:
            authors.append(token)
    return authors


def split_author_title(title: str) -> tuple[list[str], str]:
    """Split ``"Author1, Author2 - Title"`` into ``(authors, title)``.

    The split happens on the last separator.  Titles without one come back
    unchanged with an empty author list.
    """
    head, sep, tail = title.rpartition(AUTHOR_TITLE_SEPARATOR)
    if not sep or not head.strip() or not tail.strip():
        return [], title
    authors = parse_author_segment(head)
    if not authors:
        return [], title
    return authors, tail.strip()


def authors_from_title(title: str) -> list[str]:
    """Authors encoded in a bibliography title, or an empty list."""
    return split_author_title(title)[0]
