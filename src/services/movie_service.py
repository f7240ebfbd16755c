"""
Service layer for movie operations.

Movies own both relations (actors and genres), so edge operations and
embedded create-or-reuse of actors and genres are exposed here.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from models.actor import Actor
from models.genre import Genre
from models.movie import Movie
from schemas.movie import MovieCreate, MovieUpdate
from services.actor_service import create_actor
from services.association_resolver import get_or_raise, resolve_references
from services.dedup_service import insert_unique
from services.entity_store import (
    MOVIE_ACTORS,
    MOVIE_GENRES,
    actor_store,
    genre_store,
    movie_store,
)
from services.exceptions import DeleteOutcome, ResourceNotFoundError
from services.genre_service import create_genre
from services.lifecycle_service import delete_entity
from services.merge_service import AssociationPatch, apply_patch
from services.relationship_service import add_edge, link, remove_edge
from services.utils import contains_pattern

logger = logging.getLogger(__name__)


async def _get_locked(db: AsyncSession, movie_id: int) -> Movie:
    """Load a movie with its row locked for an edge operation."""
    movie = await movie_store.get(db, movie_id, for_update=True)
    if movie is None:
        raise ResourceNotFoundError(movie_store.entity_name, movie_id)
    return movie


async def create_movie(db: AsyncSession, data: MovieCreate) -> Movie:
    """
    Create a movie with its actors and genres.

    Actors and genres are given by id or as embedded payloads; an embedded
    payload matching an existing natural key reuses that entity. If anything
    fails, nothing is created (including embedded actors and genres).

    Args:
        db: Database session.
        data: Movie creation data.

    Returns:
        The created movie with actors and genres loaded.

    Raises:
        DuplicateEntityError: If a movie with the same title, release year and
            duration exists.
        ResourceNotFoundError: If an actor or genre id does not exist.
    """
    async with db.begin_nested():
        movie = Movie(
            title=data.title,
            release_year=data.release_year,
            duration_minutes=data.duration_minutes,
            actors=[],
            genres=[],
        )
        await insert_unique(db, movie_store, movie)

        actors = await resolve_references(
            db, actor_store, data.actor_ids, data.actors, create_actor,
        )
        genres = await resolve_references(
            db, genre_store, data.genre_ids, data.genres, create_genre,
        )
        for actor in actors:
            link(movie, actor, MOVIE_ACTORS)
        for genre in genres:
            link(movie, genre, MOVIE_GENRES)
        await db.flush()

    logger.info(
        "Created movie %s (%s, %s) with %s actors and %s genres",
        movie.id, movie.title, movie.release_year, len(actors), len(genres),
    )
    return await movie_store.refresh(db, movie)


async def get_movie(db: AsyncSession, movie_id: int) -> Movie:
    """Get a movie with its actors and genres. Raises ResourceNotFoundError if absent."""
    return await get_or_raise(db, movie_store, movie_id)


async def search_movies(
    db: AsyncSession,
    title: str | None = None,
    release_year: int | None = None,
    actor_id: int | None = None,
    genre_id: int | None = None,
    offset: int = 0,
    limit: int = 50,
) -> tuple[list[Movie], int]:
    """
    Page through movies matching every given filter.

    Args:
        db: Database session.
        title: Case-insensitive substring of the title.
        release_year: Exact release year.
        actor_id: Only movies featuring this actor.
        genre_id: Only movies tagged with this genre.
        offset: Pagination offset.
        limit: Pagination limit.

    Returns:
        Tuple of (list of movies, total count).

    Raises:
        ResourceNotFoundError: If `actor_id` or `genre_id` does not exist.
    """
    filters = []
    if title:
        filters.append(Movie.title.ilike(contains_pattern(title), escape="\\"))
    if release_year is not None:
        filters.append(Movie.release_year == release_year)
    if actor_id is not None:
        await get_or_raise(db, actor_store, actor_id)
        filters.append(Movie.actors.any(Actor.id == actor_id))
    if genre_id is not None:
        await get_or_raise(db, genre_store, genre_id)
        filters.append(Movie.genres.any(Genre.id == genre_id))
    return await movie_store.find_page(db, filters, offset=offset, limit=limit)


async def update_movie(db: AsyncSession, movie_id: int, data: MovieUpdate) -> Movie:
    """
    Partially update a movie.

    `actor_ids` / `genre_ids`, when provided, replace the movie's actors / genres.
    All ids are checked before anything changes.

    Raises:
        ResourceNotFoundError: If the movie or any actor or genre id does not exist.
        DuplicateEntityError: If the new natural key belongs to another movie.
    """
    scalars = data.model_dump(
        exclude_unset=True, exclude_none=True, exclude={"actor_ids", "genre_ids"},
    )
    associations = []
    if data.actor_ids is not None:
        associations.append(AssociationPatch(MOVIE_ACTORS, actor_store, data.actor_ids))
    if data.genre_ids is not None:
        associations.append(AssociationPatch(MOVIE_GENRES, genre_store, data.genre_ids))
    return await apply_patch(db, movie_store, movie_id, scalars, associations)


async def delete_movie(db: AsyncSession, movie_id: int, force: bool = False) -> DeleteOutcome:
    """Delete a movie; blocked while it has actors unless `force`. Genre links are always removed."""
    return await delete_entity(db, movie_store, movie_id, force=force)


async def get_movie_actors(db: AsyncSession, movie_id: int) -> list[Actor]:
    movie = await get_or_raise(db, movie_store, movie_id)
    return list(movie.actors)


async def get_movie_genres(db: AsyncSession, movie_id: int) -> list[Genre]:
    movie = await get_or_raise(db, movie_store, movie_id)
    return list(movie.genres)


async def add_actor_to_movie(db: AsyncSession, movie_id: int, actor_id: int) -> Movie:
    """
    Link an actor to a movie.

    Raises:
        ResourceNotFoundError: If the movie or actor does not exist.
        AssociationAlreadyExistsError: If the actor is already in the movie.
    """
    movie = await _get_locked(db, movie_id)
    actor = await get_or_raise(db, actor_store, actor_id)
    await add_edge(db, movie_store, movie, actor, MOVIE_ACTORS)
    return await movie_store.refresh(db, movie)


async def remove_actor_from_movie(db: AsyncSession, movie_id: int, actor_id: int) -> Movie:
    """
    Unlink an actor from a movie.

    Raises:
        ResourceNotFoundError: If the movie or actor does not exist.
        AssociationNotFoundError: If the actor is not in the movie.
    """
    movie = await _get_locked(db, movie_id)
    actor = await get_or_raise(db, actor_store, actor_id)
    await remove_edge(db, movie_store, movie, actor, MOVIE_ACTORS)
    return await movie_store.refresh(db, movie)


async def add_genre_to_movie(db: AsyncSession, movie_id: int, genre_id: int) -> Movie:
    """Tag a movie with a genre. Same errors as add_actor_to_movie."""
    movie = await _get_locked(db, movie_id)
    genre = await get_or_raise(db, genre_store, genre_id)
    await add_edge(db, movie_store, movie, genre, MOVIE_GENRES)
    return await movie_store.refresh(db, movie)


async def remove_genre_from_movie(db: AsyncSession, movie_id: int, genre_id: int) -> Movie:
    """Remove a genre from a movie. Same errors as remove_actor_from_movie."""
    movie = await _get_locked(db, movie_id)
    genre = await get_or_raise(db, genre_store, genre_id)
    await remove_edge(db, movie_store, movie, genre, MOVIE_GENRES)
    return await movie_store.refresh(db, movie)
