"""HTTP command API for bookimport."""

from __future__ import annotations

from .app import create_app, run_server

__all__ = [
    "create_app",
    "run_server",
]
