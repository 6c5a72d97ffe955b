"""
Column Stores
=============

Wide-column backends for the location index.

Components:
- ColumnStore: abstract range read + retried batch submit
- InMemoryColumnStore: process-local backend
- SQLColumnStore: SQLAlchemy async backend (SQLite via aiosqlite, PostgreSQL)
"""

from geoindex.storage.columns.base import ColumnStore, MutationBatch
from geoindex.storage.columns.config import SQLStoreConfig
from geoindex.storage.columns.memory import InMemoryColumnStore
from geoindex.storage.columns.sql import SQLColumnStore

__all__ = [
    "ColumnStore",
    "MutationBatch",
    "InMemoryColumnStore",
    "SQLColumnStore",
    "SQLStoreConfig",
]
