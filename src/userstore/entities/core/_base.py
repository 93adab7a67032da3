from pydantic import BaseModel, ConfigDict
from pydantic import Field as PydanticField
from sqlmodel import Field, SQLModel


class Entity(BaseModel):
    """Base entity class with a database-assigned integer identifier."""

    model_config = ConfigDict(extra="forbid")

    id: int | None = PydanticField(
        default=None,
        description="Identifier assigned by the database on insert",
    )


class EntityTable(SQLModel, table=False):
    """Base table class with an autoincrement primary key."""

    id: int | None = Field(
        default=None,
        primary_key=True,
        description="Identifier assigned by the database on insert",
    )
