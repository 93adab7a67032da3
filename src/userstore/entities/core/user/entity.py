"""User domain entity."""

from typing import Annotated

from pydantic import Field, StrictBool, StrictInt, StrictStr, StringConstraints

from userstore.entities.core._base import Entity

# Whitespace-only values count as empty; stored values are never stripped.
NonBlankStr = Annotated[StrictStr, StringConstraints(min_length=1, pattern=r"\S")]

# Range of the BIGINT phone column
PHONE_MIN = -(2**63)
PHONE_MAX = 2**63 - 1


class User(Entity):
    """User account record.

    This is the domain model that carries the field shape and validation
    rules. Values must already have the declared type: nothing is coerced,
    so ``phone="555"`` or ``admin=1`` are rejected. The ``id`` stays ``None``
    until the record has been stored.
    """

    username: NonBlankStr = Field(description="Unique login name")
    password: StrictStr = Field(min_length=1, description="Credential, stored as provided")
    phone: StrictInt | None = Field(
        default=None, ge=PHONE_MIN, le=PHONE_MAX, description="User's phone number"
    )
    admin: StrictBool | None = Field(
        default=None, description="Administrator flag; None means not an administrator"
    )

    @property
    def is_admin(self) -> bool:
        """Whether the user is an administrator, treating an absent flag as False."""
        return self.admin is True
