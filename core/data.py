"""
Data Layer Base Classes.

The data layer provides the Repository pattern for data access.
This abstracts away the specific data store (Cosmos DB, in-memory, etc.)
and provides a clean interface for the domain layer.

Key principles:
- Repositories handle CRUD operations only
- No business logic in repositories
- Return domain objects, not raw dicts
- Support for different backends via dependency injection
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, List, Optional, TypeVar

# Type variable for entity types
T = TypeVar("T")


class RepositoryError(Exception):
    """
    Storage-level failure (connectivity, throttling, constraint violation).

    Repositories wrap backend-specific exceptions in this type so callers
    only deal with one failure shape. Callers are not expected to retry.
    """


@dataclass
class QueryOptions:
    """Options for repository listing queries. None means no filter; an empty id matches nothing."""
    provider_id: Optional[str] = None
    kind: Optional[str] = None
    active_only: bool = True


class Repository(ABC, Generic[T]):
    """
    Abstract base class for repositories.

    A Repository provides data access methods for a specific entity type.
    It abstracts the underlying data store and provides a consistent interface.

    Type parameter T represents the entity type this repository manages.

    Rows are never physically removed: delete() is a soft-delete that
    flips the entity's active flag.
    """

    @abstractmethod
    def list(self, options: Optional[QueryOptions] = None) -> List[T]:
        """
        List entities matching the query options, newest first.

        Args:
            options: Filters; defaults to all active entities

        Returns:
            The matching entities (empty list when nothing matches)
        """
        pass

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """
        Get an entity by its ID.

        Args:
            id: The entity's unique identifier

        Returns:
            The entity if found, None otherwise
        """
        pass

    @abstractmethod
    def create(self, **fields: Any) -> T:
        """Create an entity; the repository assigns id and timestamps."""
        pass

    @abstractmethod
    def update(self, id: str, **changes: Any) -> Optional[T]:
        """
        Apply the non-None changes to an entity.

        Returns:
            The updated entity, or None if the ID does not exist
        """
        pass

    @abstractmethod
    def delete(self, id: str) -> bool:
        """
        Soft-delete an entity by ID.

        Returns:
            True if an active entity was deactivated, False otherwise
        """
        pass
