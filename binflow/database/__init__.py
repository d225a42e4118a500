"""
Database Module
"""
from .connection import init_database, close_database, create_tables, get_db, get_db_dependency
from .models import Base, ShiftReport, BinTipping, DowntimeReason

__all__ = [
    "init_database",
    "close_database",
    "create_tables",
    "get_db",
    "get_db_dependency",
    "Base",
    "ShiftReport",
    "BinTipping",
    "DowntimeReason",
]
