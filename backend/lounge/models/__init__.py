"""SQLAlchemy models for the lounge service."""

from lounge.models.kv import KeyValueEntry

__all__ = [
    "KeyValueEntry",
]
