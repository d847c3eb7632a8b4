"""
Database initialization helper.
"""

from app.db import Base, get_engine


def init_db(bind=None) -> None:
    """
    Create database tables for all registered models.
    """
    Base.metadata.create_all(bind=bind or get_engine())
