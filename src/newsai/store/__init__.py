"""Persistence layer."""

from newsai.store.base import NewsStore
from newsai.store.sql import SQLNewsStore

__all__ = [
    "NewsStore",
    "SQLNewsStore",
]
