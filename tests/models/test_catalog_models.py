"""Tests for the movie, actor and genre models and their junction tables."""
from datetime import date

import pytest
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from models.actor import Actor, movie_actors
from models.genre import Genre
from models.movie import Movie


async def test__timestamps_are_set_on_insert(db_session: AsyncSession) -> None:
    genre = Genre(name="Western", movies=[])
    db_session.add(genre)
    await db_session.flush()

    assert genre.created_at is not None
    assert genre.updated_at is not None


async def test__movie_natural_key_unique_constraint(db_session: AsyncSession) -> None:
    db_session.add(Movie(title="Heat", release_year=1995, duration_minutes=170))
    await db_session.flush()

    with pytest.raises(IntegrityError):
        async with db_session.begin_nested():
            db_session.add(Movie(title="Heat", release_year=1995, duration_minutes=170))
            await db_session.flush()


async def test__movie_release_year_check_constraint(db_session: AsyncSession) -> None:
    with pytest.raises(IntegrityError):
        async with db_session.begin_nested():
            db_session.add(Movie(title="Roundhay Garden Scene", release_year=1800, duration_minutes=1))
            await db_session.flush()


async def test__actor_same_name_different_birth_date(db_session: AsyncSession) -> None:
    db_session.add_all([
        Actor(name="Michael Smith", birth_date=date(1950, 1, 1)),
        Actor(name="Michael Smith", birth_date=date(1980, 1, 1)),
    ])
    await db_session.flush()

    count = await db_session.scalar(select(func.count()).select_from(Actor))
    assert count == 2


async def test__deleting_movie_row_cascades_junction_rows_only(
    db_session: AsyncSession,
    movie: Movie,
    actors: list[Actor],
) -> None:
    """ON DELETE CASCADE removes edges, never the actor on the other side."""
    movie.actors.append(actors[0])
    await db_session.flush()

    await db_session.execute(delete(Movie).where(Movie.id == movie.id))

    assert await db_session.scalar(select(func.count()).select_from(movie_actors)) == 0
    assert await db_session.scalar(select(func.count()).select_from(Actor)) == 3
