"""Pydantic schemas for movie endpoints."""
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from models.movie import EARLIEST_RELEASE_YEAR
from schemas.actor import ActorCreate
from schemas.common import ActorSummary, GenreSummary, MovieSummary
from schemas.genre import GenreCreate
from schemas.validators import validate_title


class MovieCreate(BaseModel):
    """
    Schema for creating a movie.

    Actors and genres can be referenced by id (`actor_ids`, `genre_ids`) or
    embedded as creation payloads (`actors`, `genres`). Embedded payloads whose
    natural key already exists reuse the existing row. Embedded payloads may not
    carry `movie_ids`; they are linked to the movie being created.
    """

    title: str
    release_year: int = Field(ge=EARLIEST_RELEASE_YEAR)
    duration_minutes: int = Field(ge=1)
    actor_ids: list[int] = Field(default_factory=list)
    genre_ids: list[int] = Field(default_factory=list)
    actors: list[ActorCreate] = Field(default_factory=list)
    genres: list[GenreCreate] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str) -> str:
        """Trim and require a non-empty title."""
        return validate_title(v)

    @field_validator("actors", "genres")
    @classmethod
    def check_embedded_links(
        cls, v: list[ActorCreate] | list[GenreCreate],
    ) -> list[ActorCreate] | list[GenreCreate]:
        """Embedded payloads are linked to this movie only."""
        if any(payload.movie_ids for payload in v):
            raise ValueError("Embedded actors and genres cannot set movie_ids")
        return v


class MovieUpdate(BaseModel):
    """
    Schema for partially updating a movie.

    Omitted (or null) fields are left unchanged. `actor_ids` / `genre_ids`, when
    provided, replace the movie's actors / genres entirely (not a merge).
    """

    title: str | None = None
    release_year: int | None = Field(default=None, ge=EARLIEST_RELEASE_YEAR)
    duration_minutes: int | None = Field(default=None, ge=1)
    actor_ids: list[int] | None = Field(
        default=None,
        description="If provided, this list fully replaces the current actors",
    )
    genre_ids: list[int] | None = Field(
        default=None,
        description="If provided, this list fully replaces the current genres",
    )

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str | None) -> str | None:
        """Trim and require a non-empty title when provided."""
        return v if v is None else validate_title(v)


class MovieResponse(MovieSummary):
    """Schema for a single movie with its actors and genres."""

    actors: list[ActorSummary]
    genres: list[GenreSummary]
    created_at: datetime
    updated_at: datetime
