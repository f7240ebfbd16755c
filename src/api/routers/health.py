"""Health check endpoint with catalog row counts."""
import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from db.session import get_async_session
from models.actor import Actor, movie_actors
from models.genre import Genre, movie_genres
from models.movie import Movie

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

CATALOG_TABLES = {
    "movies": Movie.__table__,
    "actors": Actor.__table__,
    "genres": Genre.__table__,
    "movie_actors": movie_actors,
    "movie_genres": movie_genres,
}


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    database: str
    catalog: dict[str, int] | None = None


async def count_catalog_rows(db: AsyncSession) -> dict[str, int]:
    """Row count per catalog table, in a single round trip."""
    query = select(*(
        select(func.count()).select_from(table).scalar_subquery().label(name)
        for name, table in CATALOG_TABLES.items()
    ))
    row = (await db.execute(query)).one()
    return dict(row._mapping)


@router.get("/health", response_model=HealthResponse)
async def health_check(
    db: AsyncSession = Depends(get_async_session),
) -> HealthResponse:
    """
    Report liveness and the size of the catalog.

    A database that fails to answer yields `degraded` with no counts, still
    with HTTP 200 so load balancers can tell the process itself is up.
    """
    try:
        catalog = await count_catalog_rows(db)
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        return HealthResponse(status="degraded", database="unhealthy")

    return HealthResponse(status="healthy", database="healthy", catalog=catalog)
