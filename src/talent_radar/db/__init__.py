"""Database configuration and utilities."""

from .session import SessionLocal, get_db
from .unit_of_work import unit_of_work

__all__ = ["get_db", "SessionLocal", "unit_of_work"]
