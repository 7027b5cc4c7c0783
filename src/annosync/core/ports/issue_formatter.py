"""
Issue Formatter Port - Abstract interface for rendering issue text.
"""

from abc import ABC, abstractmethod

from ..domain.annotation import Annotation


class IssueFormatterPort(ABC):
    """Renders titles and bodies of the issues that store annotations."""

    @abstractmethod
    def format_title(self, title_prefix: str, annotation: Annotation) -> str:
        """Issue title for an annotation."""
        ...

    @abstractmethod
    def format_new_body(self, annotation: Annotation) -> str:
        """Body of a freshly created issue, with the annotation embedded."""
        ...

    @abstractmethod
    def format_updated_body(self, prefix: str, annotation: Annotation, suffix: str) -> str:
        """Body of an existing issue with its embedded annotation replaced."""
        ...
