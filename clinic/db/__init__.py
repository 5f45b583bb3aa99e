# clinic/db/__init__.py
from .db_manager import DbManager, SQLITE_MEMORY_URL
from .deps import get_db, get_db_manager, get_session

__all__ = ["DbManager", "SQLITE_MEMORY_URL", "get_db", "get_db_manager", "get_session"]
