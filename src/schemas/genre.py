"""Pydantic schemas for genre endpoints."""
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from schemas.common import GenreSummary, MovieSummary
from schemas.validators import validate_name


class GenreCreate(BaseModel):
    """Schema for creating a genre (directly or embedded in a movie create request)."""

    name: str
    movie_ids: list[int] = Field(
        default_factory=list,
        description="Existing movies to tag with this genre",
    )

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        """Trim and require a non-empty name."""
        return validate_name(v)


class GenreUpdate(BaseModel):
    """Schema for partially updating a genre. movie_ids, when given, replaces the set."""

    name: str | None = None
    movie_ids: list[int] | None = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str | None) -> str | None:
        """Trim and require a non-empty name when provided."""
        return v if v is None else validate_name(v)


class GenreResponse(GenreSummary):
    """Schema for a single genre with its movies."""

    movies: list[MovieSummary]
    created_at: datetime
    updated_at: datetime
