"""
Single-edge add/remove for the movie/actor and movie/genre relations.

Each edge is one junction-table row, and Movie.actors / Actor.movies (likewise
for genres) are two views of the same rows, so linking through one side always
shows up on the other. An edge between a pair is either Unlinked or Linked;
add_edge is the only way out of Unlinked and remove_edge the only way out of
Linked.
"""
import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from services.entity_store import EntityStore, Relation
from services.exceptions import AssociationAlreadyExistsError, AssociationNotFoundError

logger = logging.getLogger(__name__)


def is_linked(owner: Any, target: Any, relation: Relation) -> bool:
    """Check whether `target` is in `owner`'s association set."""
    return any(linked.id == target.id for linked in getattr(owner, relation.attr))


def link(owner: Any, target: Any, relation: Relation) -> None:
    """Insert the mutual membership. The reciprocal set is updated by back_populates."""
    getattr(owner, relation.attr).append(target)


def unlink(owner: Any, target: Any, relation: Relation) -> None:
    """Remove the mutual membership from both sides."""
    collection = getattr(owner, relation.attr)
    for linked in list(collection):
        if linked.id == target.id:
            collection.remove(linked)


async def add_edge(
    db: AsyncSession,
    store: EntityStore,
    owner: Any,
    target: Any,
    relation: Relation,
) -> None:
    """
    Link two persisted entities.

    The owner should be loaded with `for_update=True` so concurrent edge
    operations on the same owner serialize.

    Raises:
        AssociationAlreadyExistsError: If the pair is already linked, including
            when a concurrent request linked it first.
    """
    if is_linked(owner, target, relation):
        raise AssociationAlreadyExistsError(
            store.entity_name, owner.id, relation.target_type, target.id,
        )

    owner_id, target_id = owner.id, target.id
    try:
        async with db.begin_nested():
            link(owner, target, relation)
            await db.flush()
    except IntegrityError as e:
        # Junction primary key rejected the row: another request linked the pair
        logger.warning(
            "Concurrent link of %s %s to %s %s",
            store.entity_name, owner_id, relation.target_type, target_id,
        )
        raise AssociationAlreadyExistsError(
            store.entity_name, owner_id, relation.target_type, target_id,
        ) from e


async def remove_edge(
    db: AsyncSession,
    store: EntityStore,
    owner: Any,
    target: Any,
    relation: Relation,
) -> None:
    """
    Unlink two persisted entities.

    Raises:
        AssociationNotFoundError: If the pair is not linked.
    """
    if not is_linked(owner, target, relation):
        raise AssociationNotFoundError(
            store.entity_name, owner.id, relation.target_type, target.id,
        )

    async with db.begin_nested():
        unlink(owner, target, relation)
        await db.flush()
