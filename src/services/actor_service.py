"""Service layer for actor operations."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from models.actor import Actor
from schemas.actor import ActorCreate, ActorUpdate
from services.association_resolver import get_or_raise, resolve_ids
from services.dedup_service import insert_unique
from services.entity_store import ACTOR_MOVIES, actor_store, movie_store
from services.exceptions import DeleteOutcome
from services.lifecycle_service import delete_entity
from services.merge_service import AssociationPatch, apply_patch
from services.relationship_service import link
from services.utils import contains_pattern

logger = logging.getLogger(__name__)


async def create_actor(db: AsyncSession, data: ActorCreate) -> Actor:
    """
    Create an actor, optionally linked to existing movies.

    Also the create operation used for actors embedded in a movie create
    request.

    Args:
        db: Database session.
        data: Actor creation data.

    Returns:
        The created actor with its movies loaded.

    Raises:
        DuplicateEntityError: If an actor with the same name and birth date exists.
        ResourceNotFoundError: If a movie id does not exist.
    """
    async with db.begin_nested():
        movies = await resolve_ids(db, movie_store, data.movie_ids)

        actor = Actor(name=data.name, birth_date=data.birth_date, movies=[])
        await insert_unique(db, actor_store, actor)
        for movie in movies:
            link(actor, movie, ACTOR_MOVIES)
        await db.flush()

    logger.info("Created actor %s (%s) linked to %s movies", actor.id, actor.name, len(movies))
    return await actor_store.refresh(db, actor)


async def get_actor(db: AsyncSession, actor_id: int) -> Actor:
    """Get an actor with its movies. Raises ResourceNotFoundError if absent."""
    return await get_or_raise(db, actor_store, actor_id)


async def search_actors(
    db: AsyncSession,
    name: str | None = None,
    offset: int = 0,
    limit: int = 50,
) -> tuple[list[Actor], int]:
    """
    Page through actors, optionally filtered by a case-insensitive name substring.

    Returns:
        Tuple of (list of actors, total count).
    """
    filters = []
    if name:
        filters.append(Actor.name.ilike(contains_pattern(name), escape="\\"))
    return await actor_store.find_page(db, filters, offset=offset, limit=limit)


async def update_actor(db: AsyncSession, actor_id: int, data: ActorUpdate) -> Actor:
    """
    Partially update an actor.

    `movie_ids`, when provided, replaces the actor's movies.

    Raises:
        ResourceNotFoundError: If the actor or a movie id does not exist.
        DuplicateEntityError: If the new name and birth date belong to another actor.
    """
    scalars = data.model_dump(exclude_unset=True, exclude_none=True, exclude={"movie_ids"})
    associations = []
    if data.movie_ids is not None:
        associations.append(AssociationPatch(ACTOR_MOVIES, movie_store, data.movie_ids))
    return await apply_patch(db, actor_store, actor_id, scalars, associations)


async def delete_actor(db: AsyncSession, actor_id: int, force: bool = False) -> DeleteOutcome:
    """Delete an actor; blocked while it appears in any movie unless `force`."""
    return await delete_entity(db, actor_store, actor_id, force=force)
