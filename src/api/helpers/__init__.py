"""API helper utilities."""
from api.helpers.errors import (
    association_exists,
    association_not_found,
    delete_blocked,
    duplicate_entity,
    not_found,
)

__all__ = [
    "association_exists",
    "association_not_found",
    "delete_blocked",
    "duplicate_entity",
    "not_found",
]
