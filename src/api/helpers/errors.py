"""Translate service exceptions and delete outcomes into HTTP errors."""
from fastapi import HTTPException, status

from services.exceptions import (
    AssociationAlreadyExistsError,
    AssociationNotFoundError,
    Blocked,
    DuplicateEntityError,
    ResourceNotFoundError,
)


def not_found(e: ResourceNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


def duplicate_entity(e: DuplicateEntityError) -> HTTPException:
    """409 carrying the id of the entity that already has the natural key."""
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={
            "message": str(e),
            "error_code": "DUPLICATE_ENTITY",
            "existing_id": e.existing_id,
        },
    )


def association_exists(e: AssociationAlreadyExistsError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={"message": str(e), "error_code": "ASSOCIATION_EXISTS"},
    )


def association_not_found(e: AssociationNotFoundError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"message": str(e), "error_code": "ASSOCIATION_NOT_FOUND"},
    )


def delete_blocked(outcome: Blocked) -> HTTPException:
    """409 for a refused delete; the client can retry with ?force=true."""
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={
            "message": (
                f"Cannot delete {outcome.entity_type} {outcome.entity_id}: "
                f"it has {outcome.count} associations. Use force=true to detach them."
            ),
            "error_code": "DELETE_BLOCKED",
            "blocking_associations": outcome.count,
            "by_relation": outcome.by_relation,
        },
    )
