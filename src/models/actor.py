"""Actor model and the movie/actor junction table."""
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import (
    Column,
    Date,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from models.movie import Movie


# Junction table for the many-to-many relationship between movies and actors.
# A single row is the source of both Movie.actors and Actor.movies.
movie_actors = Table(
    "movie_actors",
    Base.metadata,
    Column(
        "movie_id",
        Integer,
        ForeignKey("movies.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "actor_id",
        Integer,
        ForeignKey("actors.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    # Index for lookups by actor (composite PK already indexes movie_id first)
    Index("ix_movie_actors_actor_id", "actor_id"),
)


class Actor(Base, TimestampMixin):
    """Actor model - natural key is (name, birth_date)."""

    __tablename__ = "actors"
    __table_args__ = (
        UniqueConstraint("name", "birth_date", name="uq_actors_natural_key"),
    )
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    birth_date: Mapped[date] = mapped_column(Date, nullable=False)

    movies: Mapped[list["Movie"]] = relationship(
        secondary=movie_actors,
        back_populates="actors",
        order_by="Movie.id",
    )
