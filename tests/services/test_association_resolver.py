"""Tests for resolving id / payload reference lists into entities."""
from datetime import date

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.actor import Actor
from models.genre import Genre
from schemas.actor import ActorCreate
from schemas.genre import GenreCreate
from services.actor_service import create_actor
from services.association_resolver import get_or_raise, resolve_ids, resolve_references
from services.entity_store import actor_store, genre_store
from services.exceptions import ResourceNotFoundError
from services.genre_service import create_genre


async def _actor_count(db: AsyncSession) -> int:
    return await db.scalar(select(func.count()).select_from(Actor))


async def test__get_or_raise__returns_entity(
    db_session: AsyncSession,
    actors: list[Actor],
) -> None:
    actor = await get_or_raise(db_session, actor_store, actors[1].id)
    assert actor.id == actors[1].id


async def test__get_or_raise__unknown_id(db_session: AsyncSession) -> None:
    with pytest.raises(ResourceNotFoundError) as exc_info:
        await get_or_raise(db_session, actor_store, 999)

    assert exc_info.value.entity_type == "Actor"
    assert exc_info.value.entity_id == 999
    assert str(exc_info.value) == "Actor not found with id 999"


# =============================================================================
# resolve_ids Tests
# =============================================================================


async def test__resolve_ids__collapses_repeats_in_first_seen_order(
    db_session: AsyncSession,
    actors: list[Actor],
) -> None:
    a, b, c = actors
    resolved = await resolve_ids(db_session, actor_store, [c.id, a.id, c.id, b.id, a.id])

    assert [actor.id for actor in resolved] == [c.id, a.id, b.id]


async def test__resolve_ids__empty(db_session: AsyncSession) -> None:
    assert await resolve_ids(db_session, actor_store, []) == []


async def test__resolve_ids__raises_for_first_unknown_id(
    db_session: AsyncSession,
    actors: list[Actor],
) -> None:
    with pytest.raises(ResourceNotFoundError) as exc_info:
        await resolve_ids(db_session, actor_store, [actors[0].id, 404, 405])

    assert exc_info.value.entity_id == 404


# =============================================================================
# resolve_references Tests
# =============================================================================


async def test__resolve_references__creates_new_payloads(
    db_session: AsyncSession,
) -> None:
    payloads = [
        ActorCreate(name="Ashley Judd", birth_date=date(1968, 4, 19)),
        ActorCreate(name="Jon Voight", birth_date=date(1938, 12, 29)),
    ]
    resolved = await resolve_references(db_session, actor_store, [], payloads, create_actor)

    assert [a.name for a in resolved] == ["Ashley Judd", "Jon Voight"]
    assert all(a.id is not None for a in resolved)
    assert await _actor_count(db_session) == 2


async def test__resolve_references__reuses_existing_natural_key(
    db_session: AsyncSession,
    actors: list[Actor],
) -> None:
    """A payload matching an existing actor resolves to that actor."""
    payload = ActorCreate(name="Al Pacino", birth_date=date(1940, 4, 25))
    resolved = await resolve_references(db_session, actor_store, None, [payload], create_actor)

    assert [a.id for a in resolved] == [actors[0].id]
    assert await _actor_count(db_session) == 3


async def test__resolve_references__is_idempotent(
    db_session: AsyncSession,
) -> None:
    """Resolving the same list twice creates nothing the second time."""
    payloads = [GenreCreate(name="Heist")]

    first = await resolve_references(db_session, genre_store, [], payloads, create_genre)
    second = await resolve_references(db_session, genre_store, [], payloads, create_genre)

    assert [g.id for g in first] == [g.id for g in second]
    count = await db_session.scalar(select(func.count()).select_from(Genre))
    assert count == 1


async def test__resolve_references__unions_ids_and_payloads(
    db_session: AsyncSession,
    actors: list[Actor],
) -> None:
    """An id and a payload naming the same actor collapse into one entry."""
    a, b, _ = actors
    payloads = [
        ActorCreate(name="Robert De Niro", birth_date=date(1943, 8, 17)),
        ActorCreate(name="Ashley Judd", birth_date=date(1968, 4, 19)),
    ]
    resolved = await resolve_references(
        db_session, actor_store, [a.id, b.id], payloads, create_actor,
    )

    assert [x.name for x in resolved] == ["Al Pacino", "Robert De Niro", "Ashley Judd"]


async def test__resolve_references__failure_rolls_back_created_payloads(
    db_session: AsyncSession,
) -> None:
    """Entities created for earlier elements do not survive a later failure."""

    async def _create_then_fail(db: AsyncSession, payload: ActorCreate) -> Actor:
        await create_actor(db, payload)
        raise ResourceNotFoundError("Movie", 123)

    payloads = [ActorCreate(name="Ashley Judd", birth_date=date(1968, 4, 19))]
    with pytest.raises(ResourceNotFoundError):
        await resolve_references(db_session, actor_store, [], payloads, _create_then_fail)

    assert await _actor_count(db_session) == 0


async def test__resolve_references__unknown_id(
    db_session: AsyncSession,
) -> None:
    payloads = [ActorCreate(name="Ashley Judd", birth_date=date(1968, 4, 19))]
    with pytest.raises(ResourceNotFoundError):
        await resolve_references(db_session, actor_store, [77], payloads, create_actor)

    # Ids are resolved before any payload is created
    assert await _actor_count(db_session) == 0
