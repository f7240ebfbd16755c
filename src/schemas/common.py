"""Pydantic schemas shared by the movie, actor and genre endpoints."""
from datetime import date
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict


class MovieSummary(BaseModel):
    """Movie without its associations (used in lists and nested responses)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    release_year: int
    duration_minutes: int


class ActorSummary(BaseModel):
    """Actor without its associations."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    birth_date: date


class GenreSummary(BaseModel):
    """Genre without its associations."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


T = TypeVar("T")


class ListResponse(BaseModel, Generic[T]):
    """Schema for paginated list responses."""

    items: list[T]
    total: int
    offset: int
    limit: int
    has_more: bool
