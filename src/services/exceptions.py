"""Shared exceptions and result types for service layer operations."""
from dataclasses import dataclass, field


class ResourceNotFoundError(Exception):
    """Raised when an id does not resolve to a live entity."""

    def __init__(self, entity_type: str, entity_id: int) -> None:
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} not found with id {entity_id}")


class DuplicateEntityError(Exception):
    """
    Raised when an entity with the same natural key already exists.

    Carries the id of the existing entity so callers can reuse it.
    """

    def __init__(self, entity_type: str, existing_id: int) -> None:
        self.entity_type = entity_type
        self.existing_id = existing_id
        super().__init__(f"{entity_type} already exists with id {existing_id}")


class AssociationAlreadyExistsError(Exception):
    """Raised when linking two entities that are already linked."""

    def __init__(
        self, owner_type: str, owner_id: int, target_type: str, target_id: int,
    ) -> None:
        self.owner_type = owner_type
        self.owner_id = owner_id
        self.target_type = target_type
        self.target_id = target_id
        super().__init__(
            f"{target_type} with id {target_id} is already associated with "
            f"{owner_type} id {owner_id}",
        )


class AssociationNotFoundError(Exception):
    """Raised when unlinking two entities that are not linked."""

    def __init__(
        self, owner_type: str, owner_id: int, target_type: str, target_id: int,
    ) -> None:
        self.owner_type = owner_type
        self.owner_id = owner_id
        self.target_type = target_type
        self.target_id = target_id
        super().__init__(
            f"{target_type} with id {target_id} is not associated with "
            f"{owner_type} id {owner_id}",
        )


@dataclass(frozen=True)
class Deleted:
    """The entity was deleted."""

    entity_type: str
    entity_id: int
    detached: int = 0  # Associations removed before the delete


@dataclass(frozen=True)
class Blocked:
    """
    Deletion was refused because the entity still has associations.

    This is an expected outcome, not an error: the caller may retry with force.
    """

    entity_type: str
    entity_id: int
    count: int
    by_relation: dict[str, int] = field(default_factory=dict)


DeleteOutcome = Deleted | Blocked
