"""Event store service: a small FastAPI + SQLAlchemy API over a single ``events`` table."""

from .database import Base, Database, get_db  # noqa: F401

__all__ = ["Base", "Database", "get_db"]
