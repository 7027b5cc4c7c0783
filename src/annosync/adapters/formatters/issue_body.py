"""
Issue Body Formatter - Markdown text of the issues that store annotations.

A freshly created issue looks like this (CRLF line endings):

    > quoted line one
    > quoted line two

    ---

    <details><summary>Annotation</summary>

    ```annotation
    { ... }
    ```
    </details>

Everything outside the embedded block belongs to the issue's authors once
created, so updates only replace the block. Backticks in the quote are
escaped so quoted text can never open a second ```annotation block ahead
of the real one.
"""

from ...core.domain.annotation import Annotation
from ...core.domain.embedding import embed
from ...core.ports.issue_formatter import IssueFormatterPort


NO_QUOTE = "```\r\n<no quote>\r\n```"
SEPARATOR = "\r\n\r\n---\r\n\r\n"
DETAILS_OPEN = "<details><summary>Annotation</summary>\r\n\r\n"
DETAILS_CLOSE = "\r\n</details>"


class MarkdownIssueFormatter(IssueFormatterPort):
    """Renders GitHub-flavoured markdown issue bodies."""

    def format_title(self, title_prefix: str, annotation: Annotation) -> str:
        return f"{title_prefix} {annotation.title()}"

    def format_new_body(self, annotation: Annotation) -> str:
        quote = annotation.text_quote_selector()
        if quote is None:
            quote = NO_QUOTE
        else:
            quote = quote.replace("`", "\\`")

        return quote + SEPARATOR + embed(DETAILS_OPEN, annotation, DETAILS_CLOSE)

    def format_updated_body(self, prefix: str, annotation: Annotation, suffix: str) -> str:
        return embed(prefix, annotation, suffix)
