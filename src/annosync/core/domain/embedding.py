"""
Embedding Codec - Store one annotation inside free-form issue text.

The annotation is serialized as pretty-printed JSON inside a fenced block:

    ```annotation\\r\\n
    { ... }\\r\\n
    ```

Both delimiters require CRLF; text with LF-only line endings does not
contain a block. Text around the block is kept exactly as it was.
"""

import json
from dataclasses import dataclass
from typing import Optional

from ..exceptions import AnnotationDecodeError
from .annotation import Annotation


OPENING_DELIMITER = "```annotation\r\n"
CLOSING_DELIMITER = "\r\n```"


@dataclass(frozen=True)
class EmbeddedBlock:
    """
    Result of extracting a block from text.

    Exactly one of ``annotation`` and ``error`` is set.
    """

    prefix: str
    suffix: str
    annotation: Optional[Annotation] = None
    error: Optional[AnnotationDecodeError] = None

    @property
    def ok(self) -> bool:
        return self.annotation is not None


def encode(annotation: Annotation) -> str:
    """Serialize an annotation to pretty-printed JSON."""
    return json.dumps(annotation.to_dict(), indent=2, ensure_ascii=False)


def decode(raw: str) -> Annotation:
    """
    Decode the JSON payload of a block.

    Raises:
        AnnotationDecodeError: If the payload is not valid JSON or not a
            valid annotation. The error carries ``raw``.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise AnnotationDecodeError(f"Invalid JSON: {e}", raw=raw) from e

    try:
        return Annotation.from_dict(data)
    except AnnotationDecodeError as e:
        raise AnnotationDecodeError(str(e), raw=raw) from e


def extract(text: str) -> Optional[EmbeddedBlock]:
    """
    Find the first embedded block in ``text``.

    Returns:
        None when either delimiter is missing, otherwise the text before
        the block, the text after it and the decode outcome.
    """
    prefix, opening, remaining = text.partition(OPENING_DELIMITER)
    if not opening:
        return None

    raw, closing, suffix = remaining.partition(CLOSING_DELIMITER)
    if not closing:
        return None

    try:
        return EmbeddedBlock(prefix=prefix, suffix=suffix, annotation=decode(raw))
    except AnnotationDecodeError as e:
        return EmbeddedBlock(prefix=prefix, suffix=suffix, error=e)


def embed(prefix: str, annotation: Annotation, suffix: str) -> str:
    """Place ``annotation`` between ``prefix`` and ``suffix``."""
    return f"{prefix}{OPENING_DELIMITER}{encode(annotation)}{CLOSING_DELIMITER}{suffix}"
