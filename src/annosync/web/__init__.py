"""HTTP surface: the Recogito frontend and the annotation endpoints."""

from __future__ import annotations

from annosync.web.app import create_app

__all__ = ["create_app"]
