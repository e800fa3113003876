"""MongoDB access for mongopaging."""

from .connection import DatabaseExecutor, DatabaseManager, db_manager, get_executor

__all__ = ["DatabaseExecutor", "DatabaseManager", "db_manager", "get_executor"]
