"""
Per-entity-type persistence for movies, actors and genres.

Each store wraps one SQLAlchemy model and knows its natural key and its
many-to-many relations. Services never query models directly; they go through
a store so that lookups always eager-load the association sets they mutate.
"""
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.sql import ColumnElement

from models.actor import Actor
from models.base import Base
from models.genre import Genre
from models.movie import Movie

T = TypeVar("T", bound=Base)


@dataclass(frozen=True)
class Relation:
    """
    One side of a many-to-many relation.

    `attr` is the collection on the owning model (e.g. Movie.actors); the
    target model mirrors it through back_populates.
    """

    attr: str
    target_type: str


class EntityStore(Generic[T]):
    """
    Lookup, paged scan, save and delete for a single model.

    Subclasses define:
    - model: The SQLAlchemy model class
    - entity_name: Human-readable name for error messages (e.g., "Movie")
    - natural_key: Fields that identify the entity independent of its id
    - relations: Many-to-many collections owned by the model
    - blocking_relations: Collections that prevent a non-forced delete
    """

    model: type[T]
    entity_name: str
    natural_key: tuple[str, ...]
    relations: tuple[Relation, ...]
    blocking_relations: tuple[str, ...]

    def _load_options(self) -> list:
        """Eager-load every association set."""
        return [
            selectinload(getattr(self.model, relation.attr))
            for relation in self.relations
        ]

    def natural_key_of(self, source: Any) -> dict[str, Any]:
        """Extract the natural key from an entity, a schema, or a mapping."""
        if isinstance(source, Mapping):
            return {name: source[name] for name in self.natural_key}
        return {name: getattr(source, name) for name in self.natural_key}

    def association_counts(self, entity: T) -> dict[str, int]:
        """Number of linked entities per blocking relation, e.g. {"actors": 2}."""
        return {attr: len(getattr(entity, attr)) for attr in self.blocking_relations}

    async def get(
        self,
        db: AsyncSession,
        entity_id: int,
        for_update: bool = False,
    ) -> T | None:
        """
        Get an entity by ID with its association sets loaded.

        Args:
            db: Database session.
            entity_id: ID of the entity to retrieve.
            for_update: Lock the row (SELECT ... FOR UPDATE) where the database supports it.

        Returns:
            The entity if found, None otherwise.
        """
        query = (
            select(self.model)
            .options(*self._load_options())
            .where(self.model.id == entity_id)
        )
        if for_update:
            query = query.with_for_update()

        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def find_by_natural_key(
        self,
        db: AsyncSession,
        key: Mapping[str, Any],
    ) -> T | None:
        """Get the entity whose natural-key fields equal `key`, if any."""
        query = select(self.model).where(
            *(getattr(self.model, name) == key[name] for name in self.natural_key),
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def find_page(
        self,
        db: AsyncSession,
        filters: list[ColumnElement[bool]] | None = None,
        offset: int = 0,
        limit: int = 50,
    ) -> tuple[list[T], int]:
        """
        Filtered, paginated scan ordered by id.

        Returns:
            Tuple of (list of entities, total count).
        """
        base_query = select(self.model)
        for clause in filters or []:
            base_query = base_query.where(clause)

        # Get total count before pagination
        count_query = select(func.count()).select_from(base_query.subquery())
        total_result = await db.execute(count_query)
        total = total_result.scalar() or 0

        query = (
            base_query
            .options(*self._load_options())
            .order_by(self.model.id.asc())
            .offset(offset)
            .limit(limit)
        )
        result = await db.execute(query)
        return list(result.scalars().all()), total

    async def save(self, db: AsyncSession, entity: T) -> T:
        """Insert or update an entity. Assigns the id on insert."""
        db.add(entity)
        await db.flush()
        return entity

    async def refresh(self, db: AsyncSession, entity: T) -> T:
        """Reload columns and association sets from the database."""
        await db.refresh(entity)
        await db.refresh(entity, attribute_names=[r.attr for r in self.relations])
        return entity

    async def delete_by_id(self, db: AsyncSession, entity_id: int) -> bool:
        """Delete an entity. Returns True if deleted, False if not found."""
        entity = await self.get(db, entity_id)
        if entity is None:
            return False
        await db.delete(entity)
        await db.flush()
        return True


class MovieStore(EntityStore[Movie]):
    """Store for movies."""

    model = Movie
    entity_name = "Movie"
    natural_key = ("title", "release_year", "duration_minutes")
    relations = (
        Relation(attr="actors", target_type="Actor"),
        Relation(attr="genres", target_type="Genre"),
    )
    # Genre tags never block deleting a movie
    blocking_relations = ("actors",)


class ActorStore(EntityStore[Actor]):
    """Store for actors."""

    model = Actor
    entity_name = "Actor"
    natural_key = ("name", "birth_date")
    relations = (Relation(attr="movies", target_type="Movie"),)
    blocking_relations = ("movies",)


class GenreStore(EntityStore[Genre]):
    """Store for genres."""

    model = Genre
    entity_name = "Genre"
    natural_key = ("name",)
    relations = (Relation(attr="movies", target_type="Movie"),)
    blocking_relations = ("movies",)


movie_store = MovieStore()
actor_store = ActorStore()
genre_store = GenreStore()

MOVIE_ACTORS = MovieStore.relations[0]
MOVIE_GENRES = MovieStore.relations[1]
ACTOR_MOVIES = ActorStore.relations[0]
GENRE_MOVIES = GenreStore.relations[0]
