"""Storage layer for Messuopas."""

from messuopas.storage.database import Database, get_db, reset_db
from messuopas.storage.document_store import COLLECTIONS, DocumentStore

__all__ = [
    "Database",
    "get_db",
    "reset_db",
    "DocumentStore",
    "COLLECTIONS",
]
