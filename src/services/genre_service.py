"""Service layer for genre operations."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from models.genre import Genre
from schemas.genre import GenreCreate, GenreUpdate
from services.association_resolver import get_or_raise, resolve_ids
from services.dedup_service import insert_unique
from services.entity_store import GENRE_MOVIES, genre_store, movie_store
from services.exceptions import DeleteOutcome
from services.lifecycle_service import delete_entity
from services.merge_service import AssociationPatch, apply_patch
from services.relationship_service import link
from services.utils import contains_pattern

logger = logging.getLogger(__name__)


async def create_genre(db: AsyncSession, data: GenreCreate) -> Genre:
    """
    Create a genre, optionally attached to existing movies.

    Raises:
        DuplicateEntityError: If a genre with the same name exists.
        ResourceNotFoundError: If a movie id does not exist.
    """
    async with db.begin_nested():
        movies = await resolve_ids(db, movie_store, data.movie_ids)

        genre = Genre(name=data.name, movies=[])
        await insert_unique(db, genre_store, genre)
        for movie in movies:
            link(genre, movie, GENRE_MOVIES)
        await db.flush()

    logger.info("Created genre %s (%s)", genre.id, genre.name)
    return await genre_store.refresh(db, genre)


async def get_genre(db: AsyncSession, genre_id: int) -> Genre:
    return await get_or_raise(db, genre_store, genre_id)


async def search_genres(
    db: AsyncSession,
    name: str | None = None,
    offset: int = 0,
    limit: int = 50,
) -> tuple[list[Genre], int]:
    """Page through genres, optionally filtered by a case-insensitive name substring."""
    filters = []
    if name:
        filters.append(Genre.name.ilike(contains_pattern(name), escape="\\"))
    return await genre_store.find_page(db, filters, offset=offset, limit=limit)


async def update_genre(db: AsyncSession, genre_id: int, data: GenreUpdate) -> Genre:
    """Partially update a genre. `movie_ids`, when provided, replaces its movies."""
    scalars = data.model_dump(exclude_unset=True, exclude_none=True, exclude={"movie_ids"})
    associations = []
    if data.movie_ids is not None:
        associations.append(AssociationPatch(GENRE_MOVIES, movie_store, data.movie_ids))
    return await apply_patch(db, genre_store, genre_id, scalars, associations)


async def delete_genre(db: AsyncSession, genre_id: int, force: bool = False) -> DeleteOutcome:
    return await delete_entity(db, genre_store, genre_id, force=force)
