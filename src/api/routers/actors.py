"""Actor CRUD endpoints."""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_user
from api.helpers import delete_blocked, duplicate_entity, not_found
from schemas.actor import ActorCreate, ActorResponse, ActorUpdate
from schemas.common import ActorSummary, ListResponse
from services import actor_service
from services.exceptions import Blocked, DuplicateEntityError, ResourceNotFoundError

router = APIRouter(prefix="/actors", tags=["actors"])


@router.post("/", response_model=ActorResponse, status_code=201)
async def create_actor(
    data: ActorCreate,
    _current_user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> ActorResponse:
    """Create an actor, optionally linked to existing movies."""
    try:
        actor = await actor_service.create_actor(db, data)
    except ResourceNotFoundError as e:
        raise not_found(e) from e
    except DuplicateEntityError as e:
        raise duplicate_entity(e) from e
    return ActorResponse.model_validate(actor)


@router.get("/", response_model=ListResponse[ActorSummary])
async def list_actors(
    name: str | None = Query(default=None, description="Case-insensitive name substring"),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
    _current_user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> ListResponse[ActorSummary]:
    """List actors ordered by id."""
    actors, total = await actor_service.search_actors(db, name=name, offset=offset, limit=limit)
    items = [ActorSummary.model_validate(a) for a in actors]
    return ListResponse[ActorSummary](
        items=items,
        total=total,
        offset=offset,
        limit=limit,
        has_more=offset + len(items) < total,
    )


@router.get("/{actor_id}", response_model=ActorResponse)
async def get_actor(
    actor_id: int,
    _current_user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> ActorResponse:
    """Get an actor with their movies."""
    try:
        actor = await actor_service.get_actor(db, actor_id)
    except ResourceNotFoundError as e:
        raise not_found(e) from e
    return ActorResponse.model_validate(actor)


@router.patch("/{actor_id}", response_model=ActorResponse)
async def update_actor(
    actor_id: int,
    data: ActorUpdate,
    _current_user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> ActorResponse:
    """Partially update an actor. `movie_ids`, when present, replaces their movies."""
    try:
        actor = await actor_service.update_actor(db, actor_id, data)
    except ResourceNotFoundError as e:
        raise not_found(e) from e
    except DuplicateEntityError as e:
        raise duplicate_entity(e) from e
    return ActorResponse.model_validate(actor)


@router.delete("/{actor_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_actor(
    actor_id: int,
    force: bool = Query(default=False, description="Detach from movies first"),
    _current_user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> None:
    """
    Delete an actor.

    Returns 409 while the actor appears in any movie, unless force=true.
    """
    try:
        outcome = await actor_service.delete_actor(db, actor_id, force=force)
    except ResourceNotFoundError as e:
        raise not_found(e) from e
    if isinstance(outcome, Blocked):
        raise delete_blocked(outcome)
