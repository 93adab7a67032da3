"""Errors raised by the user record store."""

from typing import Any

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

# Storage and transport failures propagate unmodified from SQLAlchemy.
EngineError = SQLAlchemyError


class UserStoreError(Exception):
    """Base exception for all user store errors."""


class ValidationError(UserStoreError):
    """Raised when a field is missing, empty, mis-typed or unknown."""

    def __init__(self, errors: list[dict[str, str]]):
        """Initialize the exception.

        Args:
            errors: One ``{"field": ..., "message": ...}`` entry per problem.
        """
        self.errors = errors
        details = "; ".join(f"{e['field']}: {e['message']}" for e in errors)
        super().__init__(f"Invalid user record: {details}")

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        """Build from a pydantic validation error."""
        errors = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error["loc"]) or "__root__"
            errors.append({"field": location, "message": error["msg"]})
        return cls(errors)

    @property
    def fields(self) -> list[str]:
        return [e["field"] for e in self.errors]


class UniquenessConflictError(UserStoreError):
    """Raised when the username is already taken by another record."""

    def __init__(self, username: Any):
        self.username = username
        super().__init__(f"Username '{username}' already exists")


class NotFoundError(UserStoreError):
    """Raised when no user has the referenced id."""

    def __init__(self, user_id: Any):
        self.user_id = user_id
        super().__init__(f"User '{user_id}' not found")
