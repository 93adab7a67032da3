"""User repository for data access operations."""

from sqlalchemy import func
from sqlmodel import Session, select

from .entity import User
from .table import UserTable


class UserRepository:
    """Data-access layer for users.

    The repository flushes changes so database constraints fire inside the
    current transaction, but never commits; the caller owns the transaction.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, user_id: int) -> User | None:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True)

    def get_by_username(self, username: str, case_sensitive: bool = True) -> User | None:
        if case_sensitive:
            statement = select(UserTable).where(UserTable.username == username)
        else:
            statement = select(UserTable).where(
                func.lower(UserTable.username) == func.lower(username)
            )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True)

    def list_users(self, offset: int = 0, limit: int = 100) -> list[User]:
        statement = select(UserTable).order_by(UserTable.id).offset(offset).limit(limit)
        return [
            User.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        ]

    def create(self, user: User) -> User:
        """Insert a user and return it with the database-assigned id."""
        row = UserTable.model_validate(user.model_dump(exclude={"id"}))
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return User.model_validate(row, from_attributes=True)

    def update(self, user: User) -> User | None:
        """Overwrite the stored fields of an existing user.

        Returns None when no row has the user's id.
        """
        row = self._session.get(UserTable, user.id)
        if row is None:
            return None
        for field, value in user.model_dump(exclude={"id"}).items():
            setattr(row, field, value)
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return User.model_validate(row, from_attributes=True)

    def delete(self, user_id: int) -> bool:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True
