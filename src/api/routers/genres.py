"""Genre CRUD endpoints."""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_user
from api.helpers import delete_blocked, duplicate_entity, not_found
from schemas.common import GenreSummary, ListResponse
from schemas.genre import GenreCreate, GenreResponse, GenreUpdate
from services import genre_service
from services.exceptions import Blocked, DuplicateEntityError, ResourceNotFoundError

router = APIRouter(prefix="/genres", tags=["genres"])


@router.post("/", response_model=GenreResponse, status_code=201)
async def create_genre(
    data: GenreCreate,
    _current_user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> GenreResponse:
    try:
        genre = await genre_service.create_genre(db, data)
    except ResourceNotFoundError as e:
        raise not_found(e) from e
    except DuplicateEntityError as e:
        raise duplicate_entity(e) from e
    return GenreResponse.model_validate(genre)


@router.get("/", response_model=ListResponse[GenreSummary])
async def list_genres(
    name: str | None = Query(default=None, description="Case-insensitive name substring"),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
    _current_user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> ListResponse[GenreSummary]:
    genres, total = await genre_service.search_genres(db, name=name, offset=offset, limit=limit)
    items = [GenreSummary.model_validate(g) for g in genres]
    return ListResponse[GenreSummary](
        items=items,
        total=total,
        offset=offset,
        limit=limit,
        has_more=offset + len(items) < total,
    )


@router.get("/{genre_id}", response_model=GenreResponse)
async def get_genre(
    genre_id: int,
    _current_user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> GenreResponse:
    try:
        genre = await genre_service.get_genre(db, genre_id)
    except ResourceNotFoundError as e:
        raise not_found(e) from e
    return GenreResponse.model_validate(genre)


@router.patch("/{genre_id}", response_model=GenreResponse)
async def update_genre(
    genre_id: int,
    data: GenreUpdate,
    _current_user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> GenreResponse:
    """Partially update a genre. `movie_ids`, when present, replaces its movies."""
    try:
        genre = await genre_service.update_genre(db, genre_id, data)
    except ResourceNotFoundError as e:
        raise not_found(e) from e
    except DuplicateEntityError as e:
        raise duplicate_entity(e) from e
    return GenreResponse.model_validate(genre)


@router.delete("/{genre_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_genre(
    genre_id: int,
    force: bool = Query(default=False, description="Detach from movies first"),
    _current_user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> None:
    """Delete a genre. Returns 409 while any movie uses it, unless force=true."""
    try:
        outcome = await genre_service.delete_genre(db, genre_id, force=force)
    except ResourceNotFoundError as e:
        raise not_found(e) from e
    if isinstance(outcome, Blocked):
        raise delete_blocked(outcome)
