"""HTTP routes."""

from annosync.web.routes import annotations, frontend

__all__ = ["annotations", "frontend"]
