"""Tests for genre service layer functionality."""
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from models.genre import Genre
from models.movie import Movie
from schemas.genre import GenreCreate, GenreUpdate
from services import genre_service
from services.exceptions import Blocked, Deleted, DuplicateEntityError, ResourceNotFoundError


async def test__create_genre__with_movies(
    db_session: AsyncSession,
    movie: Movie,
) -> None:
    genre = await genre_service.create_genre(
        db_session, GenreCreate(name="Heist", movie_ids=[movie.id]),
    )

    assert genre.id is not None
    assert [m.id for m in genre.movies] == [movie.id]
    assert [g.name for g in movie.genres] == ["Heist"]


async def test__create_genre__duplicate_name(
    db_session: AsyncSession,
    genres: list[Genre],
) -> None:
    with pytest.raises(DuplicateEntityError) as exc_info:
        await genre_service.create_genre(db_session, GenreCreate(name="Thriller"))
    assert exc_info.value.existing_id == genres[1].id


async def test__get_genre__not_found(db_session: AsyncSession) -> None:
    with pytest.raises(ResourceNotFoundError):
        await genre_service.get_genre(db_session, 3)


async def test__search_genres(
    db_session: AsyncSession,
    genres: list[Genre],
) -> None:
    found, total = await genre_service.search_genres(db_session, name="thr")
    assert [g.name for g in found] == ["Thriller"]
    assert total == 1


async def test__update_genre__rename_and_replace_movies(
    db_session: AsyncSession,
    movie: Movie,
    other_movie: Movie,
    genres: list[Genre],
) -> None:
    crime = genres[0]
    updated = await genre_service.update_genre(
        db_session, crime.id, GenreUpdate(name="Crime Drama", movie_ids=[movie.id, other_movie.id]),
    )

    assert updated.name == "Crime Drama"
    assert [m.id for m in updated.movies] == [movie.id, other_movie.id]
    assert [g.id for g in other_movie.genres] == [crime.id]


async def test__update_genre__rename_onto_existing(
    db_session: AsyncSession,
    genres: list[Genre],
) -> None:
    with pytest.raises(DuplicateEntityError):
        await genre_service.update_genre(db_session, genres[0].id, GenreUpdate(name="Thriller"))


async def test__delete_genre__blocked_and_forced(
    db_session: AsyncSession,
    movie: Movie,
    genres: list[Genre],
) -> None:
    await genre_service.update_genre(db_session, genres[0].id, GenreUpdate(movie_ids=[movie.id]))

    blocked = await genre_service.delete_genre(db_session, genres[0].id)
    assert isinstance(blocked, Blocked)
    assert blocked.count == 1

    forced = await genre_service.delete_genre(db_session, genres[0].id, force=True)
    assert isinstance(forced, Deleted)
    assert movie.genres == []
