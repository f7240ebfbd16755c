"""
Partial updates with replace-semantics on association sets.

Scalar fields present in a patch overwrite the entity; absent fields are left
alone. An association id list present in a patch is the complete new set for
that relation: links not in the list are removed from both sides, new ids are
linked, and links present in both are left untouched.
"""
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from services.association_resolver import get_or_raise, resolve_ids
from services.dedup_service import ensure_unique
from services.entity_store import EntityStore, Relation
from services.relationship_service import link, unlink


@dataclass(frozen=True)
class AssociationPatch:
    """A replacement id list for one relation of the entity being updated."""

    relation: Relation
    target_store: EntityStore
    ids: list[int]


def replace_association_set(entity: Any, relation: Relation, targets: list[Any]) -> None:
    """Make `entity`'s association set exactly `targets`, touching only the difference."""
    current = {linked.id: linked for linked in getattr(entity, relation.attr)}
    wanted = {target.id: target for target in targets}

    for target_id, linked in current.items():
        if target_id not in wanted:
            unlink(entity, linked, relation)
    for target_id, target in wanted.items():
        if target_id not in current:
            link(entity, target, relation)


async def apply_patch(
    db: AsyncSession,
    store: EntityStore,
    entity_id: int,
    scalars: Mapping[str, Any],
    associations: list[AssociationPatch],
) -> Any:
    """
    Apply a partial update to an entity.

    Every referenced id is resolved and the natural key re-checked before
    anything is changed, so a bad id leaves scalars and associations untouched.
    The update runs in a savepoint.

    Args:
        db: Database session.
        store: Store of the entity being updated.
        entity_id: ID of the entity to update.
        scalars: Field values to overwrite (only fields that were provided).
        associations: Replacement id lists (only relations that were provided).

    Returns:
        The updated entity, reloaded.

    Raises:
        ResourceNotFoundError: If the entity or any referenced id does not exist.
        DuplicateEntityError: If the new natural key belongs to another entity.
    """
    async with db.begin_nested():
        entity = await get_or_raise(db, store, entity_id)

        if any(name in scalars for name in store.natural_key):
            merged = store.natural_key_of(entity) | {
                name: scalars[name] for name in store.natural_key if name in scalars
            }
            await ensure_unique(db, store, merged, exclude_id=entity.id)

        # Resolve every list before mutating anything
        replacements = [
            (patch.relation, await resolve_ids(db, patch.target_store, patch.ids))
            for patch in associations
        ]

        for field, value in scalars.items():
            setattr(entity, field, value)
        for relation, targets in replacements:
            replace_association_set(entity, relation, targets)

        await db.flush()

    return await store.refresh(db, entity)
