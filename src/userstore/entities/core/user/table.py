"""User database table model."""

from sqlalchemy import BigInteger, Boolean, Column, String, UniqueConstraint
from sqlmodel import Field

from userstore.entities.core._base import EntityTable

USERNAME_CONSTRAINT = "uq_users_username"
USERNAME_LOWER_INDEX = "uq_users_username_lower"


class UserTable(EntityTable, table=True):
    """Database persistence model for users.

    Username uniqueness is enforced by the database through a named unique
    constraint, so concurrent inserts cannot both succeed.
    """

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("username", name=USERNAME_CONSTRAINT),
        # Ids of deleted users are never handed out again
        {"sqlite_autoincrement": True},
    )

    username: str = Field(sa_column=Column(String, nullable=False))
    password: str = Field(sa_column=Column(String, nullable=False))
    phone: int | None = Field(default=None, sa_column=Column(BigInteger, nullable=True))
    admin: bool | None = Field(default=None, sa_column=Column(Boolean, nullable=True))
