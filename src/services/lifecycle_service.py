"""Deletion guard shared by movies, actors and genres."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from services.entity_store import EntityStore
from services.exceptions import Blocked, Deleted, DeleteOutcome, ResourceNotFoundError
from services.relationship_service import unlink

logger = logging.getLogger(__name__)


async def delete_entity(
    db: AsyncSession,
    store: EntityStore,
    entity_id: int,
    force: bool = False,
) -> DeleteOutcome:
    """
    Delete an entity unless it still has associations.

    Without `force`, an entity with links in any of its store's blocking
    relations is left untouched and a Blocked result reports how many links are
    in the way. Otherwise every edge (blocking or not) is unlinked on both
    sides first, then the entity is deleted. Linked entities are never deleted.

    The whole sequence runs in a savepoint.

    Args:
        db: Database session.
        store: Store of the entity type.
        entity_id: ID of the entity to delete.
        force: Detach associations instead of refusing.

    Returns:
        Deleted or Blocked.

    Raises:
        ResourceNotFoundError: If the entity does not exist.
    """
    async with db.begin_nested():
        entity = await store.get(db, entity_id, for_update=True)
        if entity is None:
            raise ResourceNotFoundError(store.entity_name, entity_id)

        counts = store.association_counts(entity)
        blocking = sum(counts.values())
        if blocking and not force:
            logger.info(
                "Refusing to delete %s %s: %s associations %s",
                store.entity_name, entity_id, blocking, counts,
            )
            return Blocked(
                entity_type=store.entity_name,
                entity_id=entity_id,
                count=blocking,
                by_relation=counts,
            )

        # Unlinking through the entity's own sets also updates every loaded
        # counterpart set via back_populates.
        detached = 0
        for relation in store.relations:
            for other in list(getattr(entity, relation.attr)):
                unlink(entity, other, relation)
                detached += 1
        await db.flush()

        await store.delete_by_id(db, entity_id)

    if detached:
        logger.info(
            "Deleted %s %s after detaching %s associations",
            store.entity_name, entity_id, detached,
        )
    return Deleted(entity_type=store.entity_name, entity_id=entity_id, detached=detached)
