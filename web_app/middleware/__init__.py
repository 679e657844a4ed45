"""Middleware for URL shortener web app."""

from .session import SessionMiddleware, SESSION_COOKIE_NAME, get_user_token
from .logging import LoggingMiddleware

__all__ = ["SessionMiddleware", "SESSION_COOKIE_NAME", "get_user_token", "LoggingMiddleware"]
