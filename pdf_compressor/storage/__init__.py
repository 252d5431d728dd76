"""In-memory session storage."""

from .sessions import SessionRegistry

__all__ = ["SessionRegistry"]
