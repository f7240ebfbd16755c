"""SQLAlchemy models."""
from models.base import Base, TimestampMixin
from models.actor import Actor, movie_actors  # Must be before movie due to import
from models.genre import Genre, movie_genres
from models.movie import Movie

__all__ = [
    "Actor",
    "Base",
    "Genre",
    "Movie",
    "TimestampMixin",
    "movie_actors",
    "movie_genres",
]
