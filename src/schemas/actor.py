"""Pydantic schemas for actor endpoints."""
from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from schemas.common import ActorSummary, MovieSummary
from schemas.validators import validate_birth_date, validate_name


class ActorCreate(BaseModel):
    """
    Schema for creating an actor.

    Also used for actors embedded in a movie create request, where an actor
    matching an existing (name, birth_date) is reused instead of created.
    """

    name: str
    birth_date: date
    movie_ids: list[int] = Field(
        default_factory=list,
        description="Existing movies to link this actor to",
    )

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        """Trim and require a non-empty name."""
        return validate_name(v)

    @field_validator("birth_date")
    @classmethod
    def check_birth_date(cls, v: date) -> date:
        """Reject birth dates in the future."""
        return validate_birth_date(v)


class ActorUpdate(BaseModel):
    """
    Schema for partially updating an actor.

    Omitted (or null) fields are left unchanged. When movie_ids is provided it
    replaces the actor's movies entirely; an empty list removes all of them.
    """

    name: str | None = None
    birth_date: date | None = None
    movie_ids: list[int] | None = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str | None) -> str | None:
        """Trim and require a non-empty name when provided."""
        return v if v is None else validate_name(v)

    @field_validator("birth_date")
    @classmethod
    def check_birth_date(cls, v: date | None) -> date | None:
        """Reject birth dates in the future."""
        return v if v is None else validate_birth_date(v)


class ActorResponse(ActorSummary):
    """Schema for a single actor with its movies."""

    movies: list[MovieSummary]
    created_at: datetime
    updated_at: datetime
