"""Reads paper entries from a markdown bibliography."""

import re
from pathlib import Path
from typing import Iterable, Union

from citebot.models.paper import Paper

# "- Some Title [[paper](https://arxiv.org/abs/2401.01234)]"
PAPER_LINE_RE = re.compile(r"-\s+([^\[]+)\[\[paper\]\(([^)]+)\)")


def parse_markdown_lines(lines: Iterable[str]) -> list[Paper]:
    """Extract ``(title, url)`` entries from markdown lines.

    Lines without a ``[[paper](...)]`` link are ignored.
    """
    papers = []
    for line in lines:
        match = PAPER_LINE_RE.search(line)
        if not match:
            continue
        title = match.group(1).strip()
        url = match.group(2).strip()
        if title and url:
            papers.append(Paper(title=title, url=url))
    return papers


def parse_markdown_papers(path: Union[str, Path]) -> list[Paper]:
    """Read a markdown file and return its paper entries.

    Raises:
        FileNotFoundError: If *path* does not exist
    """
    with open(path, "r", encoding="utf-8") as f:
        return parse_markdown_lines(f)
