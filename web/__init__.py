"""HTTP front end for playing against the engine."""

from .app import create_app

__all__ = ["create_app"]
