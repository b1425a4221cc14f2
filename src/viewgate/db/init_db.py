"""
Database initialization helper.
"""

from viewgate.db import Base, engine


def init_db() -> None:
    """
    Create database tables for all registered models.
    """
    Base.metadata.create_all(bind=engine)
