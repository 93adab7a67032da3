"""Core services exports."""

# Database Services
from .database.db_manage import DbManageService
from .database.db_session import DbSessionService

# User Services
from .user.user_store import UserRecordStore

__all__ = [
    # Database Services
    "DbManageService",
    "DbSessionService",
    # User Services
    "UserRecordStore",
]
