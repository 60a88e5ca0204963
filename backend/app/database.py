"""SQLAlchemy engine for the search index database."""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from .config import DATABASE_URL


def make_engine(url: str = DATABASE_URL) -> Engine:
    """Engine with pre-ping; SQLite connections may be shared across threads."""
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args, pool_pre_ping=True)


engine = make_engine()
