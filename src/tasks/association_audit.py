"""
Dangling association detection and cleanup.

Detects movie_actors / movie_genres rows whose movie, actor or genre no longer
exists. Foreign keys with ON DELETE CASCADE normally prevent this, but rows can
be left behind when they were written while foreign keys were not enforced
(e.g. a SQLite connection without PRAGMA foreign_keys, or a bulk import).

Usage:
    python -m tasks.association_audit            # Report only (default)
    python -m tasks.association_audit --delete   # Report and delete dangling rows
"""
import argparse
import asyncio
import logging
from dataclasses import dataclass, field

from sqlalchemy import Column, Table
from sqlalchemy import delete as sa_delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from db.session import async_session_factory
from models.actor import Actor, movie_actors
from models.base import Base
from models.genre import Genre, movie_genres
from models.movie import Movie

logger = logging.getLogger(__name__)

# (junction table, junction column, model the column must reference)
JUNCTION_REFERENCES: list[tuple[Table, Column, type[Base]]] = [
    (movie_actors, movie_actors.c.movie_id, Movie),
    (movie_actors, movie_actors.c.actor_id, Actor),
    (movie_genres, movie_genres.c.movie_id, Movie),
    (movie_genres, movie_genres.c.genre_id, Genre),
]


@dataclass
class AuditStats:
    """Statistics from an association audit run."""

    dangling: int = 0
    total_deleted: int = 0
    by_reference: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, int | dict[str, int]]:
        """Convert to simple dict for logging/return."""
        return {
            "dangling": self.dangling,
            "total_deleted": self.total_deleted,
            "by_reference": dict(self.by_reference),
        }


async def audit_associations(db: AsyncSession, delete: bool = False) -> AuditStats:
    """
    Count (and optionally delete) junction rows pointing at missing entities.

    Counted per referenced column, so in report mode a row missing both its
    movie and its actor is counted twice. In delete mode a row is removed by
    the first matching statement and not counted again.

    Args:
        db: Database session.
        delete: If True, delete the dangling rows and commit. If False
                (default), only report them.

    Returns:
        AuditStats keyed by "<table>.<column>".
    """
    stats = AuditStats()

    for table, column, model in JUNCTION_REFERENCES:
        target_exists = select(model.id).where(model.id == column).exists()

        if delete:
            result = await db.execute(sa_delete(table).where(~target_exists))
            count = result.rowcount
        else:
            count = await db.scalar(
                select(func.count()).select_from(table).where(~target_exists),
            ) or 0

        if count > 0:
            key = f"{table.name}.{column.name}"
            stats.dangling += count
            stats.by_reference[key] = count
            logger.info(
                "%s %d dangling rows in %s referencing missing %s",
                "Deleted" if delete else "Found",
                count,
                table.name,
                model.__tablename__,
            )

    stats.total_deleted = stats.dangling if delete else 0

    if delete:
        await db.commit()

    return stats


async def run_association_audit(
    db: AsyncSession | None = None,
    delete: bool = False,
) -> AuditStats:
    """
    Entry point for the association audit.

    Args:
        db: Database session. If None, creates one from async_session_factory.
        delete: If True, delete dangling rows.
    """
    logger.info("Starting association audit (delete=%s)", delete)

    if db is not None:
        stats = await audit_associations(db, delete=delete)
    else:
        async with async_session_factory() as session:
            stats = await audit_associations(session, delete=delete)

    logger.info("Association audit complete: %s", stats.to_dict())
    return stats


def main() -> None:
    """CLI entry point with --delete flag."""
    parser = argparse.ArgumentParser(
        description="Detect and optionally remove dangling movie associations.",
    )
    parser.add_argument(
        "--delete",
        action="store_true",
        help="Delete dangling association rows (default: report only)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run_association_audit(delete=args.delete))


if __name__ == "__main__":
    main()
