import pytest

from citebot.services.markdown_service import parse_markdown_lines, parse_markdown_papers

MARKDOWN = """\
# Reading list

## Transformers
- Attention Is All You Need [[paper](https://arxiv.org/abs/1706.03762)]
- Vaswani et al. - Attention Is All You Need [[paper](https://arxiv.org/pdf/1706.03762)] [[code](https://github.com/x)]
* Not a list entry we read [[paper](https://example.com/a)]
- No link here
- Graph Language Models [[paper](https://aclanthology.org/2024.acl-long.245/)]
"""


def test_parse_lines():
    papers = parse_markdown_lines(MARKDOWN.splitlines())
    assert [(p.title, p.url) for p in papers] == [
        ("Attention Is All You Need", "https://arxiv.org/abs/1706.03762"),
        ("Vaswani et al. - Attention Is All You Need", "https://arxiv.org/pdf/1706.03762"),
        ("Graph Language Models", "https://aclanthology.org/2024.acl-long.245/"),
    ]


def test_parse_file(tmp_path):
    path = tmp_path / "papers.md"
    path.write_text(MARKDOWN, encoding="utf-8")
    assert len(parse_markdown_papers(path)) == 3


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        parse_markdown_papers(tmp_path / "missing.md")
