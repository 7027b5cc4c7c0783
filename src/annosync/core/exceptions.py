"""
Exceptions - Centralized exception hierarchy.

Tracker transport errors live with the tracker port
(see ports/issue_tracker.py); everything else is defined here.
"""

from typing import Optional


class AnnosyncError(Exception):
    """Base class for all annosync errors."""


class AnnotationDecodeError(AnnosyncError):
    """
    An embedded block or request payload is not a valid annotation.

    Keeps the raw text that failed to decode so callers can log or
    report it.
    """

    def __init__(self, message: str, raw: Optional[str] = None):
        super().__init__(message)
        self.raw = raw


class ConfigError(AnnosyncError):
    """Configuration is missing or invalid. Fatal at startup."""

    def __init__(self, message: str, problems: Optional[list[str]] = None):
        super().__init__(message)
        self.problems = problems or []
