"""Database module - session management and base classes."""

from tumbi.db.base import Base
from tumbi.db.session import get_db, AsyncSessionLocal, engine

__all__ = ["Base", "get_db", "AsyncSessionLocal", "engine"]
