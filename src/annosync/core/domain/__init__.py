"""
Domain - Annotations, the embedding codec and domain events.
"""

from .annotation import (
    Annotation,
    Body,
    Selector,
    Status,
    Target,
    TextPositionSelector,
    TextQuoteSelector,
    TextualBody,
)
from .embedding import (
    CLOSING_DELIMITER,
    OPENING_DELIMITER,
    EmbeddedBlock,
    decode,
    embed,
    encode,
    extract,
)
from .events import (
    AnnotationMatched,
    DomainEvent,
    EventBus,
    IssueCreated,
    IssueRelabeled,
    IssueRetitled,
    IssueUpdated,
    UpsertFailed,
)

__all__ = [
    "Annotation",
    "Body",
    "Selector",
    "Status",
    "Target",
    "TextPositionSelector",
    "TextQuoteSelector",
    "TextualBody",
    "CLOSING_DELIMITER",
    "OPENING_DELIMITER",
    "EmbeddedBlock",
    "decode",
    "embed",
    "encode",
    "extract",
    "AnnotationMatched",
    "DomainEvent",
    "EventBus",
    "IssueCreated",
    "IssueRelabeled",
    "IssueRetitled",
    "IssueUpdated",
    "UpsertFailed",
]
