"""Domain exceptions.

Errors raised when the list subsystem is asked to do something that
cannot be satisfied, such as addressing an unknown device category or
updating a list that does not exist.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class UnknownCategoryError(DomainError):
    """Raised when a device category is not one of the known categories."""

    def __init__(self, category: str, known: list[str]) -> None:
        """Initialize unknown category error.

        Args:
            category: The category that was requested.
            known: Categories the service supports.
        """
        super().__init__(
            f"Unknown device category '{category}'. Known categories: {known}",
            details={"category": category, "known_categories": known},
        )


class CatalogListNotFoundError(DomainError):
    """Raised when a catalog list cannot be found."""

    def __init__(self, identifier: str) -> None:
        """Initialize catalog list not found error.

        Args:
            identifier: List ID or list kind that was looked up.
        """
        super().__init__(
            f"Catalog list not found: {identifier}",
            details={"identifier": identifier},
        )


class DuplicateListKindError(DomainError):
    """Raised when creating a list whose kind already exists."""

    def __init__(self, list_kind: str) -> None:
        super().__init__(
            f"Catalog list already exists: {list_kind}",
            details={"list_kind": list_kind},
        )
