"""Tests for the markdown issue body formatter."""

from annosync.adapters.formatters import MarkdownIssueFormatter
from annosync.core.domain.embedding import extract

from conftest import make_annotation


class TestFormatNewBody:
    """Tests for MarkdownIssueFormatter.format_new_body()."""

    def test_quote_then_details(self):
        body = MarkdownIssueFormatter().format_new_body(make_annotation(exact="one\ntwo"))

        assert body.startswith("> one\r\n> two\r\n\r\n---\r\n\r\n<details>")
        assert extract(body).annotation.comment() == "Typo here"

    def test_fence_in_quote_is_escaped(self):
        annotation = make_annotation(exact="see\n```annotation\nbelow")

        body = MarkdownIssueFormatter().format_new_body(annotation)

        assert "> \\`\\`\\`annotation\r\n" in body
        block = extract(body)
        assert block.ok
        assert block.annotation == annotation
        assert block.prefix.startswith("> see\r\n")

    def test_title(self):
        title = MarkdownIssueFormatter().format_title("[Validation]", make_annotation(comment="Typo"))

        assert title == "[Validation] Typo"
