"""Persistence layer for snaplink."""

from .base import URLStoreBase
from .json_store import JSONFileStore

__all__ = ["URLStoreBase", "JSONFileStore"]
