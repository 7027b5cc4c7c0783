"""
Domain Events - Things that happened in the domain.

Events are immutable records of something that occurred.
They enable loose coupling and audit trails.
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional
from uuid import uuid4


@dataclass(frozen=True)
class DomainEvent:
    """Base class for all domain events."""

    event_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def event_type(self) -> str:
        """Get the event type name."""
        return self.__class__.__name__


@dataclass(frozen=True)
class AnnotationMatched(DomainEvent):
    """Event: An incoming annotation was matched to an existing issue."""

    annotation_id: str = ""
    issue_number: Optional[int] = None


@dataclass(frozen=True)
class IssueCreated(DomainEvent):
    """Event: A new issue was created."""

    issue_number: Optional[int] = None
    title: str = ""
    labels: tuple = ()


@dataclass(frozen=True)
class IssueUpdated(DomainEvent):
    """Event: An existing issue was updated."""

    issue_number: Optional[int] = None
    title: Optional[str] = None
    body_changed: bool = False
    labels: Optional[tuple] = None


@dataclass(frozen=True)
class UpsertFailed(DomainEvent):
    """Event: Storing an annotation failed."""

    annotation_id: str = ""
    error: str = ""


@dataclass(frozen=True)
class IssueRetitled(DomainEvent):
    """Event: An issue title prefix was rewritten by a maintenance run."""

    issue_number: Optional[int] = None
    old_title: str = ""
    new_title: str = ""


@dataclass(frozen=True)
class IssueRelabeled(DomainEvent):
    """Event: An issue label was swapped by a maintenance run."""

    issue_number: Optional[int] = None
    old_label: str = ""
    new_label: str = ""


class EventBus:
    """
    Simple event bus for publishing and subscribing to domain events.

    Handlers subscribed to ``DomainEvent`` receive every event. Only the
    most recent ``max_history`` events are kept.
    """

    DEFAULT_MAX_HISTORY = 1000

    def __init__(self, max_history: int = DEFAULT_MAX_HISTORY):
        self._handlers: dict[type, list[Callable[[DomainEvent], None]]] = {}
        self._history: deque[DomainEvent] = deque(maxlen=max_history)

    def subscribe(self, event_type: type, handler: Callable[[DomainEvent], None]) -> None:
        """Subscribe a handler to an event type."""
        self._handlers.setdefault(event_type, []).append(handler)

    def publish(self, event: DomainEvent) -> None:
        """Publish an event to all subscribers."""
        self._history.append(event)

        for handler in self._handlers.get(type(event), []):
            handler(event)

        if type(event) is not DomainEvent:
            for handler in self._handlers.get(DomainEvent, []):
                handler(event)

    def get_history(self) -> list[DomainEvent]:
        """Get the retained published events, oldest first."""
        return list(self._history)

    def clear_history(self) -> None:
        """Clear event history."""
        self._history.clear()
