"""Database configuration and utilities."""

from .session import Base, SessionLocal, get_db
from .transaction import run_in_transaction

__all__ = ["Base", "get_db", "run_in_transaction", "SessionLocal"]
