"""Middleware for snaplink web app."""

from .logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
