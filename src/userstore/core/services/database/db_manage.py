"""Schema creation for the user store tables."""

from loguru import logger
from sqlalchemy import Column, Index, MetaData, String, Table, func
from sqlalchemy.schema import CreateIndex
from sqlmodel import SQLModel

from userstore.core.services.database.db_session import DbSessionService
from userstore.entities.core.user.table import USERNAME_LOWER_INDEX, UserTable
from userstore.runtime.config.config_data import ConfigData
from userstore.runtime.context import get_config


def _username_lower_index() -> Index:
    # Built on a detached table so the index never joins UserTable's metadata
    users = Table(UserTable.__tablename__, MetaData(), Column("username", String))
    return Index(USERNAME_LOWER_INDEX, func.lower(users.c.username), unique=True)


class DbManageService:
    def __init__(self, db_session_service: DbSessionService, config: ConfigData | None = None):
        self._engine = db_session_service.engine
        self._config = config or get_config()

    def create_all(self) -> None:
        """Create all database tables and the indexes required by the username policy."""
        SQLModel.metadata.create_all(self._engine, tables=[UserTable.__table__])

        if not self._config.users.case_sensitive_usernames:
            with self._engine.begin() as conn:
                conn.execute(CreateIndex(_username_lower_index(), if_not_exists=True))
            logger.info("Ensured case-insensitive username index {}", USERNAME_LOWER_INDEX)

        logger.info("Database initialized with tables.")
