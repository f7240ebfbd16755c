"""
Resolve reference lists into persisted entities.

A create request may reference related entities two ways: by id, or by an
embedded creation payload. Embedded payloads are "create-or-reuse": when the
payload's natural key already exists, the existing entity is used instead.
"""
from collections.abc import Awaitable, Callable, Iterable
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from models.base import Base
from services.entity_store import EntityStore
from services.exceptions import DuplicateEntityError, ResourceNotFoundError

T = TypeVar("T", bound=Base)
P = TypeVar("P")


async def get_or_raise(db: AsyncSession, store: EntityStore[T], entity_id: int) -> T:
    """Look an entity up by id, raising ResourceNotFoundError if absent."""
    entity = await store.get(db, entity_id)
    if entity is None:
        raise ResourceNotFoundError(store.entity_name, entity_id)
    return entity


async def resolve_ids(
    db: AsyncSession,
    store: EntityStore[T],
    ids: Iterable[int],
) -> list[T]:
    """
    Resolve existing ids, collapsing repeats, preserving first-seen order.

    Raises:
        ResourceNotFoundError: For the first id that does not exist.
    """
    resolved: dict[int, T] = {}
    for entity_id in ids:
        if entity_id not in resolved:
            resolved[entity_id] = await get_or_raise(db, store, entity_id)
    return list(resolved.values())


async def resolve_references(
    db: AsyncSession,
    store: EntityStore[T],
    ids: Iterable[int] | None,
    payloads: Iterable[P] | None,
    create: Callable[[AsyncSession, P], Awaitable[T]],
) -> list[T]:
    """
    Turn a mixed reference list into a list of persisted entities.

    Ids are looked up. Each payload is created through `create`; if creation
    fails with DuplicateEntityError, the entity named by its `existing_id` is
    reused. Entities are de-duplicated by id. Resolving the same list twice
    yields the same entities and creates nothing the second time.

    Runs in a savepoint: if any element fails, entities created for earlier
    payloads are rolled back.

    Args:
        db: Database session.
        store: Store of the referenced entity type.
        ids: Ids of existing entities.
        payloads: Embedded creation payloads.
        create: The entity type's create operation.

    Returns:
        Resolved entities in first-seen order.

    Raises:
        ResourceNotFoundError: If an id does not exist.
    """
    resolved: dict[int, T] = {}
    async with db.begin_nested():
        for entity in await resolve_ids(db, store, ids or []):
            resolved.setdefault(entity.id, entity)

        for payload in payloads or []:
            try:
                entity = await create(db, payload)
            except DuplicateEntityError as e:
                entity = await get_or_raise(db, store, e.existing_id)
            resolved.setdefault(entity.id, entity)

    return list(resolved.values())
