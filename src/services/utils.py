"""Utility functions for service layer operations."""


def escape_ilike(value: str) -> str:
    r"""
    Escape LIKE/ILIKE wildcards so user input matches literally.

    `%` and `_` are wildcards and `\\` is the escape character in the patterns
    built by the search functions, which all pass `escape="\\"`.
    """
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def contains_pattern(value: str) -> str:
    """Build a case-insensitive "contains" pattern for ILIKE."""
    return f"%{escape_ilike(value)}%"
