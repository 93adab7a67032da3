"""User record store: validation plus uniqueness-enforcing persistence."""

from collections.abc import Mapping
from typing import Any

from loguru import logger
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError

from userstore.core.exceptions import (
    NotFoundError,
    UniquenessConflictError,
    ValidationError,
)
from userstore.core.services.database.db_session import DbSessionService
from userstore.entities.core.user import User, UserRepository
from userstore.entities.core.user.table import (
    USERNAME_CONSTRAINT,
    USERNAME_LOWER_INDEX,
    UserTable,
)
from userstore.runtime.context import get_config

UPDATABLE_FIELDS = frozenset({"username", "password", "phone", "admin"})


def _is_username_conflict(exc: IntegrityError) -> bool:
    """Whether an integrity error was raised by one of the username unique indexes."""
    message = str(exc.orig).lower()
    if USERNAME_CONSTRAINT in message or USERNAME_LOWER_INDEX in message:
        return True
    # SQLite reports the column rather than the constraint name
    return f"unique constraint failed: {UserTable.__tablename__}.username" in message


def _validate(data: Mapping[str, Any]) -> User:
    try:
        return User.model_validate(dict(data))
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e) from e


class UserRecordStore:
    """Store for user records on top of a SQL database.

    Every operation runs in its own transaction. Username uniqueness is left
    to the database's unique constraint: writes are attempted directly and a
    constraint violation is reported as ``UniquenessConflictError``, so two
    concurrent creates of the same username can never both succeed.
    """

    def __init__(
        self,
        db_session_service: DbSessionService,
        case_sensitive_usernames: bool | None = None,
    ):
        self._db = db_session_service
        if case_sensitive_usernames is None:
            case_sensitive_usernames = get_config().users.case_sensitive_usernames
        self._case_sensitive = case_sensitive_usernames

    def create(self, candidate: User | Mapping[str, Any]) -> User:
        """Validate and persist a new user.

        Args:
            candidate: A ``User`` entity or a mapping of its fields. Must not
                carry an ``id``.

        Returns:
            The stored user with its database-assigned ``id``.

        Raises:
            ValidationError: A required field is missing, empty or mis-typed.
            UniquenessConflictError: The username is already taken.
        """
        data = candidate.model_dump() if isinstance(candidate, User) else dict(candidate)
        if data.get("id") is not None:
            raise ValidationError([{"field": "id", "message": "id is assigned by the database"}])
        data.pop("id", None)
        user = _validate(data)

        try:
            with self._db.session_scope() as session:
                created = UserRepository(session).create(user)
        except IntegrityError as e:
            if _is_username_conflict(e):
                raise UniquenessConflictError(user.username) from e
            raise

        logger.info("Created user {} ({})", created.id, created.username)
        return created

    def update(self, user_id: int, changes: Mapping[str, Any]) -> User:
        """Apply a partial change set to an existing user.

        ``phone`` and ``admin`` may be set to ``None`` to clear them. Keeping
        the record's own username is not a conflict.

        Raises:
            NotFoundError: No user has ``user_id``.
            ValidationError: The change set or the resulting record is invalid.
            UniquenessConflictError: The new username belongs to another user.
        """
        unknown = sorted(set(changes) - UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(
                [{"field": name, "message": "field cannot be updated"} for name in unknown]
            )

        try:
            with self._db.session_scope() as session:
                repo = UserRepository(session)
                current = repo.get(user_id)
                if current is None:
                    raise NotFoundError(user_id)
                if not changes:
                    return current

                merged = _validate({**current.model_dump(), **changes})
                updated = repo.update(merged)
        except IntegrityError as e:
            if _is_username_conflict(e):
                raise UniquenessConflictError(changes.get("username")) from e
            raise

        logger.info("Updated user {} fields: {}", user_id, ", ".join(sorted(changes)))
        return updated

    def find_by_username(self, username: str) -> User | None:
        """Return the user with ``username``, or None when there is none."""
        with self._db.session_scope() as session:
            user = UserRepository(session).get_by_username(
                username, case_sensitive=self._case_sensitive
            )
        logger.debug("Lookup for username {}: {}", username, "found" if user else "absent")
        return user

    def get(self, user_id: int) -> User | None:
        """Return the user with ``user_id``, or None when there is none."""
        with self._db.session_scope() as session:
            return UserRepository(session).get(user_id)

    def list_users(self, offset: int = 0, limit: int = 100) -> list[User]:
        with self._db.session_scope() as session:
            return UserRepository(session).list_users(offset=offset, limit=limit)

    def delete(self, user_id: int) -> bool:
        """Delete the user with ``user_id``.

        Returns:
            True once the record has been removed.

        Raises:
            NotFoundError: No user has ``user_id``.
        """
        with self._db.session_scope() as session:
            if not UserRepository(session).delete(user_id):
                raise NotFoundError(user_id)

        logger.info("Deleted user {}", user_id)
        return True
