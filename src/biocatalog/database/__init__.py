"""Database package: engine/session management and row-level persistence."""

from biocatalog.database.core import DatabaseService
from biocatalog.database.store import DataStore, PersistenceError

__all__ = [
    "DataStore",
    "DatabaseService",
    "PersistenceError",
]
