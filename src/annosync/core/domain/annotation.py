"""
Annotation Model - Web annotations as produced by Recogito.

An annotation is a comment or highlight anchored to a quoted span (or a
character range) of the reference document. The wire shape follows the
W3C Web Annotation data model:

    {
        "@context": "http://www.w3.org/ns/anno.jsonld",
        "type": "Annotation",
        "body": [{"type": "TextualBody", "purpose": "...", "value": "..."}],
        "target": {"selector": [{"type": "TextQuoteSelector", "exact": "..."}]},
        "id": "#...",
        "meta": null
    }

Body and selector variants are closed unions discriminated by ``type``.
Unknown variants fail to decode instead of being dropped.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional, Union

from ..exceptions import AnnotationDecodeError


DEFAULT_CONTEXT = "http://www.w3.org/ns/anno.jsonld"
ANNOTATION_TYPE = "Annotation"
COMMENTING = "commenting"
NO_TITLE = "<error: no title>"


class Status(Enum):
    """Open/closed state of the issue that stores an annotation."""

    OPEN = "Open"
    CLOSED = "Closed"

    @classmethod
    def from_issue_state(cls, state: str) -> "Status":
        """Map a tracker issue state ("open"/"closed") to a status."""
        if str(state).lower() == "open":
            return cls.OPEN
        return cls.CLOSED


# -------------------------------------------------------------------------
# Bodies and selectors
# -------------------------------------------------------------------------

@dataclass(frozen=True)
class TextualBody:
    """A textual body entry (comment, tag, ...)."""

    purpose: str
    value: str

    TYPE = "TextualBody"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.TYPE, "purpose": self.purpose, "value": self.value}


@dataclass(frozen=True)
class TextQuoteSelector:
    """Selects the quoted text of the document."""

    exact: str

    TYPE = "TextQuoteSelector"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.TYPE, "exact": self.exact}


@dataclass(frozen=True)
class TextPositionSelector:
    """Selects a character range of the document."""

    start: int
    end: int

    TYPE = "TextPositionSelector"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.TYPE, "start": self.start, "end": self.end}


Body = TextualBody
Selector = Union[TextQuoteSelector, TextPositionSelector]


@dataclass(frozen=True)
class Target:
    """Where the annotation attaches, as an ordered list of selectors."""

    selector: tuple[Selector, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"selector": [s.to_dict() for s in self.selector]}


# -------------------------------------------------------------------------
# Annotation
# -------------------------------------------------------------------------

@dataclass(frozen=True)
class Annotation:
    """
    A single annotation.

    ``id`` is assigned by the client and is the only key used to find the
    issue that stores the annotation. ``meta`` is derived from the issue
    state on read and ignored on write.
    """

    id: str
    body: tuple[Body, ...] = ()
    target: Target = field(default_factory=Target)
    context: str = DEFAULT_CONTEXT
    type: str = ANNOTATION_TYPE
    meta: Optional[Status] = None

    # -------------------------------------------------------------------------
    # Derived text
    # -------------------------------------------------------------------------

    def comment(self) -> Optional[str]:
        """Value of the last commenting body, if any."""
        comment = None
        for body in self.body:
            if body.purpose == COMMENTING:
                comment = body.value
        return comment

    def quote(self) -> Optional[str]:
        """
        Quoted text collapsed to a single line.

        Only text quote selectors count, and the last one wins.
        """
        quote = None
        for selector in self.target.selector:
            if isinstance(selector, TextQuoteSelector):
                quote = "".join(
                    f"{line.strip()} " for line in _lines(selector.exact)
                ).strip()
        return quote

    def title(self) -> str:
        """Human readable title: the comment, else the quote."""
        comment = self.comment()
        if comment is not None:
            return comment

        quote = self.quote()
        if quote is not None:
            return quote

        return NO_TITLE

    def text_quote_selector(self) -> Optional[str]:
        """
        Render the first selector as a markdown blockquote.

        Returns None unless the first selector is a text quote selector.
        """
        if not self.target.selector:
            return None

        first = self.target.selector[0]
        if not isinstance(first, TextQuoteSelector):
            return None

        return "".join(
            f"> {line.strip()}\r\n" for line in _lines(first.exact)
        ).strip()

    # -------------------------------------------------------------------------
    # Copies
    # -------------------------------------------------------------------------

    def without_meta(self) -> "Annotation":
        return replace(self, meta=None)

    def with_status(self, status: Status) -> "Annotation":
        return replace(self, meta=status)

    # -------------------------------------------------------------------------
    # Wire format
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire shape (field order is significant)."""
        return {
            "@context": self.context,
            "type": self.type,
            "body": [b.to_dict() for b in self.body],
            "target": self.target.to_dict(),
            "id": self.id,
            "meta": self.meta.value if self.meta else None,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Annotation":
        """
        Decode the wire shape.

        Raises:
            AnnotationDecodeError: If a field is missing, has the wrong type,
                or a body/selector has an unknown ``type``.
        """
        data = _expect(data, dict, "annotation")

        target = _expect(_field(data, "target"), dict, "target")
        selectors = _expect(_field(target, "selector"), list, "target.selector")
        bodies = _expect(_field(data, "body"), list, "body")

        meta = data.get("meta")
        if meta is not None:
            try:
                meta = Status(meta)
            except ValueError:
                raise AnnotationDecodeError(f"Unknown meta status: {meta!r}") from None

        return cls(
            context=_string(data, "@context", DEFAULT_CONTEXT),
            type=_string(data, "type", ANNOTATION_TYPE),
            body=tuple(_decode_body(b) for b in bodies),
            target=Target(selector=tuple(_decode_selector(s) for s in selectors)),
            id=_string(data, "id"),
            meta=meta,
        )


# -------------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------------

def _lines(text: str) -> list[str]:
    """Split on LF, dropping a trailing CR per line and a final empty line."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _decode_body(data: Any) -> Body:
    data = _expect(data, dict, "body entry")
    kind = _field(data, "type")

    if kind == TextualBody.TYPE:
        return TextualBody(
            purpose=_string(data, "purpose"),
            value=_string(data, "value"),
        )

    raise AnnotationDecodeError(f"Unknown body type: {kind!r}")


def _decode_selector(data: Any) -> Selector:
    data = _expect(data, dict, "selector")
    kind = _field(data, "type")

    if kind == TextQuoteSelector.TYPE:
        return TextQuoteSelector(exact=_string(data, "exact"))
    if kind == TextPositionSelector.TYPE:
        return TextPositionSelector(
            start=_offset(data, "start"),
            end=_offset(data, "end"),
        )

    raise AnnotationDecodeError(f"Unknown selector type: {kind!r}")


def _field(data: dict, name: str) -> Any:
    if name not in data:
        raise AnnotationDecodeError(f"Missing field: {name}")
    return data[name]


def _expect(value: Any, kind: type, what: str) -> Any:
    if not isinstance(value, kind):
        raise AnnotationDecodeError(
            f"Expected {kind.__name__} for {what}, got {type(value).__name__}"
        )
    return value


def _string(data: dict, name: str, default: Optional[str] = None) -> str:
    if default is not None and name not in data:
        return default
    return _expect(_field(data, name), str, name)


def _offset(data: dict, name: str) -> int:
    value = _field(data, name)
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise AnnotationDecodeError(f"Expected unsigned integer for {name}, got {value!r}")
    return value
