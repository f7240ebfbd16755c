"""Movie model."""
from sqlalchemy import CheckConstraint, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.actor import Actor, movie_actors
from models.base import Base, TimestampMixin
from models.genre import Genre, movie_genres

# Earliest year a motion picture could have been released
EARLIEST_RELEASE_YEAR = 1888


class Movie(Base, TimestampMixin):
    """
    Movie model - natural key is (title, release_year, duration_minutes).

    Actors and genres are linked through the movie_actors / movie_genres junction
    tables. Deleting a movie removes its junction rows, never the actors or genres.
    """

    __tablename__ = "movies"
    __table_args__ = (
        UniqueConstraint(
            "title", "release_year", "duration_minutes",
            name="uq_movies_natural_key",
        ),
        CheckConstraint(
            f"release_year >= {EARLIEST_RELEASE_YEAR}",
            name="ck_movies_release_year",
        ),
        CheckConstraint("duration_minutes >= 1", name="ck_movies_duration"),
    )
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    release_year: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)

    actors: Mapped[list[Actor]] = relationship(
        secondary=movie_actors,
        back_populates="movies",
        order_by=Actor.id,
    )
    genres: Mapped[list[Genre]] = relationship(
        secondary=movie_genres,
        back_populates="movies",
        order_by=Genre.id,
    )
