"""High-level server and database clients."""

from .database import CouchDatabase
from .server import CouchServer

__all__ = ["CouchDatabase", "CouchServer"]
