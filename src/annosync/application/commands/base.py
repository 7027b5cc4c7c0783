"""
Command Base - Shared command interface and result type.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from ...core.domain.events import DomainEvent, EventBus


@dataclass
class CommandResult:
    """Result of executing a command."""

    success: bool = True
    data: Any = None
    error: Optional[str] = None
    dry_run: bool = False
    skipped: bool = False

    @classmethod
    def ok(cls, data: Any = None, dry_run: bool = False) -> "CommandResult":
        return cls(success=True, data=data, dry_run=dry_run)

    @classmethod
    def fail(cls, error: str) -> "CommandResult":
        return cls(success=False, error=error)

    @classmethod
    def skip(cls, reason: str) -> "CommandResult":
        return cls(success=True, skipped=True, data=reason)


class Command(ABC):
    """
    A single write operation against the tracker.

    Subclasses implement ``validate`` and ``_execute``; ``execute`` handles
    validation, dry-run and logging.
    """

    def __init__(self, event_bus: Optional[EventBus] = None, dry_run: bool = False):
        self.event_bus = event_bus
        self.dry_run = dry_run
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    @abstractmethod
    def description(self) -> str:
        """Human readable summary used in logs."""
        ...

    @abstractmethod
    def validate(self) -> Optional[str]:
        """Return an error message if the command cannot run, else None."""
        ...

    @abstractmethod
    def _execute(self) -> CommandResult:
        ...

    def execute(self) -> CommandResult:
        error = self.validate()
        if error:
            return CommandResult.fail(error)

        if self.dry_run:
            self.logger.info(f"[DRY-RUN] Would {self.description}")
            return CommandResult.ok(dry_run=True)

        return self._execute()

    def _publish(self, event: DomainEvent) -> None:
        if self.event_bus:
            self.event_bus.publish(event)
