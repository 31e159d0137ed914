"""SQLite persistence for progression data"""

from geo_elevate.db.connection import Database, transaction

__all__ = ["Database", "transaction"]
