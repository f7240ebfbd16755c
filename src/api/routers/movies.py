"""Movie CRUD endpoints and actor/genre edge endpoints."""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_user
from api.helpers import (
    association_exists,
    association_not_found,
    delete_blocked,
    duplicate_entity,
    not_found,
)
from models.movie import EARLIEST_RELEASE_YEAR
from schemas.common import ActorSummary, GenreSummary, ListResponse, MovieSummary
from schemas.movie import MovieCreate, MovieResponse, MovieUpdate
from services import movie_service
from services.exceptions import (
    AssociationAlreadyExistsError,
    AssociationNotFoundError,
    Blocked,
    DuplicateEntityError,
    ResourceNotFoundError,
)

router = APIRouter(prefix="/movies", tags=["movies"])


@router.post("/", response_model=MovieResponse, status_code=201)
async def create_movie(
    data: MovieCreate,
    _current_user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> MovieResponse:
    """
    Create a movie.

    Actors and genres may be referenced by id or embedded; embedded entities
    that already exist (same natural key) are reused.
    """
    try:
        movie = await movie_service.create_movie(db, data)
    except ResourceNotFoundError as e:
        raise not_found(e) from e
    except DuplicateEntityError as e:
        raise duplicate_entity(e) from e
    return MovieResponse.model_validate(movie)


@router.get("/", response_model=ListResponse[MovieSummary])
async def list_movies(
    title: str | None = Query(default=None, description="Case-insensitive title substring"),
    year: int | None = Query(default=None, ge=EARLIEST_RELEASE_YEAR, description="Release year"),
    actor: int | None = Query(default=None, description="Only movies with this actor id"),
    genre: int | None = Query(default=None, description="Only movies with this genre id"),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
    _current_user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> ListResponse[MovieSummary]:
    """List movies matching every given filter, ordered by id."""
    try:
        movies, total = await movie_service.search_movies(
            db,
            title=title,
            release_year=year,
            actor_id=actor,
            genre_id=genre,
            offset=offset,
            limit=limit,
        )
    except ResourceNotFoundError as e:
        raise not_found(e) from e

    items = [MovieSummary.model_validate(m) for m in movies]
    return ListResponse[MovieSummary](
        items=items,
        total=total,
        offset=offset,
        limit=limit,
        has_more=offset + len(items) < total,
    )


@router.get("/{movie_id}", response_model=MovieResponse)
async def get_movie(
    movie_id: int,
    _current_user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> MovieResponse:
    """Get a movie with its actors and genres."""
    try:
        movie = await movie_service.get_movie(db, movie_id)
    except ResourceNotFoundError as e:
        raise not_found(e) from e
    return MovieResponse.model_validate(movie)


@router.patch("/{movie_id}", response_model=MovieResponse)
async def update_movie(
    movie_id: int,
    data: MovieUpdate,
    _current_user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> MovieResponse:
    """
    Partially update a movie.

    `actor_ids` / `genre_ids`, when present, replace the current sets.
    """
    try:
        movie = await movie_service.update_movie(db, movie_id, data)
    except ResourceNotFoundError as e:
        raise not_found(e) from e
    except DuplicateEntityError as e:
        raise duplicate_entity(e) from e
    return MovieResponse.model_validate(movie)


@router.delete("/{movie_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_movie(
    movie_id: int,
    force: bool = Query(default=False, description="Detach actors and genres first"),
    _current_user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> None:
    """
    Delete a movie.

    Returns 409 while the movie still has actors or genres, unless force=true.
    Actors and genres themselves are never deleted.
    """
    try:
        outcome = await movie_service.delete_movie(db, movie_id, force=force)
    except ResourceNotFoundError as e:
        raise not_found(e) from e
    if isinstance(outcome, Blocked):
        raise delete_blocked(outcome)


# Actor edges


@router.get("/{movie_id}/actors", response_model=list[ActorSummary])
async def get_movie_actors(
    movie_id: int,
    _current_user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> list[ActorSummary]:
    """List the actors of a movie."""
    try:
        actors = await movie_service.get_movie_actors(db, movie_id)
    except ResourceNotFoundError as e:
        raise not_found(e) from e
    return [ActorSummary.model_validate(a) for a in actors]


@router.post(
    "/{movie_id}/actors/{actor_id}",
    response_model=MovieResponse,
    status_code=201,
)
async def add_actor(
    movie_id: int,
    actor_id: int,
    _current_user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> MovieResponse:
    """Add an actor to a movie."""
    try:
        movie = await movie_service.add_actor_to_movie(db, movie_id, actor_id)
    except ResourceNotFoundError as e:
        raise not_found(e) from e
    except AssociationAlreadyExistsError as e:
        raise association_exists(e) from e
    return MovieResponse.model_validate(movie)


@router.delete(
    "/{movie_id}/actors/{actor_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def remove_actor(
    movie_id: int,
    actor_id: int,
    _current_user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> None:
    """Remove an actor from a movie."""
    try:
        await movie_service.remove_actor_from_movie(db, movie_id, actor_id)
    except ResourceNotFoundError as e:
        raise not_found(e) from e
    except AssociationNotFoundError as e:
        raise association_not_found(e) from e


# Genre edges


@router.get("/{movie_id}/genres", response_model=list[GenreSummary])
async def get_movie_genres(
    movie_id: int,
    _current_user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> list[GenreSummary]:
    """List the genres of a movie."""
    try:
        genres = await movie_service.get_movie_genres(db, movie_id)
    except ResourceNotFoundError as e:
        raise not_found(e) from e
    return [GenreSummary.model_validate(g) for g in genres]


@router.post(
    "/{movie_id}/genres/{genre_id}",
    response_model=MovieResponse,
    status_code=201,
)
async def add_genre(
    movie_id: int,
    genre_id: int,
    _current_user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> MovieResponse:
    """Tag a movie with a genre."""
    try:
        movie = await movie_service.add_genre_to_movie(db, movie_id, genre_id)
    except ResourceNotFoundError as e:
        raise not_found(e) from e
    except AssociationAlreadyExistsError as e:
        raise association_exists(e) from e
    return MovieResponse.model_validate(movie)


@router.delete(
    "/{movie_id}/genres/{genre_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def remove_genre(
    movie_id: int,
    genre_id: int,
    _current_user: str = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> None:
    """Remove a genre from a movie."""
    try:
        await movie_service.remove_genre_from_movie(db, movie_id, genre_id)
    except ResourceNotFoundError as e:
        raise not_found(e) from e
    except AssociationNotFoundError as e:
        raise association_not_found(e) from e
