"""
Shared validation functions for Pydantic schemas.

This module contains validators used across the movie, actor and genre schemas.
"""
from datetime import date

from core.config import get_settings


def validate_required_text(value: str, field_name: str, max_length: int) -> str:
    """
    Trim surrounding whitespace and require a non-empty value.

    Raises:
        ValueError: If the value is blank or longer than `max_length`.
    """
    trimmed = value.strip()
    if not trimmed:
        raise ValueError(f"{field_name} cannot be empty")
    if len(trimmed) > max_length:
        raise ValueError(
            f"{field_name} exceeds maximum length of {max_length} characters "
            f"(got {len(trimmed)})",
        )
    return trimmed


def validate_title(value: str) -> str:
    """Validate a movie title."""
    return validate_required_text(value, "Title", get_settings().max_title_length)


def validate_name(value: str) -> str:
    """Validate an actor or genre name."""
    return validate_required_text(value, "Name", get_settings().max_name_length)


def validate_birth_date(value: date) -> date:
    """
    Require a birth date that is not in the future.

    Raises:
        ValueError: If the date is after today.
    """
    if value > date.today():
        raise ValueError("Birth date must be in the past or present")
    return value
