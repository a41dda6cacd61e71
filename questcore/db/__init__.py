"""Database access: SQLAlchemy engine/session handling and ORM tables."""

from questcore.db.database import Database, get_database

__all__ = ["Database", "get_database"]
