"""Natural-key uniqueness checks for movies, actors and genres."""
import logging
from collections.abc import Mapping
from typing import Any, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from models.base import Base
from services.entity_store import EntityStore
from services.exceptions import DuplicateEntityError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Base)


async def ensure_unique(
    db: AsyncSession,
    store: EntityStore[T],
    key: Mapping[str, Any],
    exclude_id: int | None = None,
) -> None:
    """
    Fail if another entity already has this natural key.

    Read-only. Must run before the candidate is persisted.

    Args:
        db: Database session.
        store: Store of the entity type being checked.
        key: Natural-key field values of the candidate.
        exclude_id: Ignore this entity (used when updating an entity in place).

    Raises:
        DuplicateEntityError: Carrying the id of the existing entity.
    """
    existing = await store.find_by_natural_key(db, key)
    if existing is not None and existing.id != exclude_id:
        raise DuplicateEntityError(store.entity_name, existing.id)


async def insert_unique(
    db: AsyncSession,
    store: EntityStore[T],
    entity: T,
) -> T:
    """
    Check the natural key, then insert the entity.

    If a concurrent request inserts the same natural key between the check and
    the flush, the unique constraint fires; the existing row is looked up again
    and reported as a duplicate.

    Raises:
        DuplicateEntityError: If the natural key is already taken.
    """
    key = store.natural_key_of(entity)
    await ensure_unique(db, store, key)

    try:
        async with db.begin_nested():
            await store.save(db, entity)
    except IntegrityError as e:
        existing = await store.find_by_natural_key(db, key)
        if existing is None:
            raise
        logger.warning(
            "Concurrent insert of %s with natural key %s; existing id %s",
            store.entity_name, key, existing.id,
        )
        raise DuplicateEntityError(store.entity_name, existing.id) from e
    return entity
