"""
Repository contract shared by all entity repositories.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Iterable, List, Optional, Type, TypeVar

T = TypeVar('T')

class AbstractRepository(ABC, Generic[T]):
    """Abstract base class for repositories over one mapped entity type."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    @abstractmethod
    def close(self) -> None:
        """Release the underlying session."""
        pass

    @abstractmethod
    def add(self, obj: T) -> None:
        """Persist a new entity."""
        pass

    @abstractmethod
    def add_return_id(self, obj: T) -> Any:
        """Persist a new entity and return its generated identifier."""
        pass

    @abstractmethod
    def add_range(self, objs: Iterable[T]) -> None:
        """Persist several new entities at once."""
        pass

    @abstractmethod
    def update(self, obj: T) -> T:
        """Persist the state of a possibly detached entity."""
        pass

    @abstractmethod
    def remove(self, obj: T) -> None:
        """Delete an entity."""
        pass

    @abstractmethod
    def get_by_id(self, id: Any) -> Optional[T]:
        """Get an entity by primary key."""
        pass

    @abstractmethod
    def find(self, *criteria: Any, **filters: Any) -> List[T]:
        """Get the entities matching criteria and equality filters."""
        pass

    @abstractmethod
    def get_cols_all(self, *columns: Any, as_type: Optional[Type] = None) -> List[Any]:
        """Project columns over every row."""
        pass

    @abstractmethod
    def get_cols_by(self, criteria: Any, *columns: Any, as_type: Optional[Type] = None) -> List[Any]:
        """Project columns over the rows matching criteria."""
        pass

    @abstractmethod
    def get_top_cols_by(
        self,
        criteria: Any,
        columns: Iterable[Any],
        top_rows_number: int,
        as_type: Optional[Type] = None
    ) -> List[Any]:
        """Project columns over the first rows matching criteria."""
        pass

    @abstractmethod
    def get_all(self) -> List[T]:
        """Get every entity."""
        pass

    @abstractmethod
    def execute_reader_procedure(
        self,
        stored_procedure: str,
        parameters: Any = None,
        as_type: Optional[Type] = None
    ) -> List[Any]:
        """Run a stored procedure and map its rows."""
        pass
