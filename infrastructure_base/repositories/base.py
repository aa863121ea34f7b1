"""
Base repository pattern implementation for database operations.

This module provides a generic repository that can be used directly or
extended by specific model repositories. It covers CRUD operations,
column projections mapped back onto the entity (or onto a caller-specified
type) and stored procedure calls with dotted-column result mapping.

Errors raised by SQLAlchemy or the database driver are not caught here;
they reach the caller unchanged and the session is left for the caller to
roll back.
"""

import logging
import operator
from typing import Any, Callable, Generic, Iterable, List, Mapping, Optional, Type, TypeVar

from sqlalchemy import inspect as sa_inspect
from sqlalchemy import select
from sqlalchemy.orm import Session

from infrastructure_base.exceptions import IdentifierAccessError
from infrastructure_base.mapping import ObjectMapper, default_mapper
from infrastructure_base.procedures.reader import Parameters, ProcedureReader
from infrastructure_base.repositories.interface import AbstractRepository

T = TypeVar('T')

logger = logging.getLogger(__name__)

class RepositoryBase(AbstractRepository[T], Generic[T]):
    """
    Generic repository for database operations.

    This class provides common operations for any SQLAlchemy model. It can
    be extended by specific model repositories to add custom queries.

    Attributes:
        db (Session): SQLAlchemy database session
        model (Type[T]): SQLAlchemy model class
        id_getter (Callable[[T], Any]): Reads the identifier of an entity
        procedures (ProcedureReader): Reader used for stored procedure calls
    """

    def __init__(
        self,
        db: Session,
        model: Type[T],
        id_getter: Optional[Callable[[T], Any]] = None,
        procedures: Optional[ProcedureReader] = None,
        mapper: Optional[ObjectMapper] = None
    ):
        """
        Initialize the repository with a database session and model class.

        Args:
            db (Session): SQLAlchemy database session
            model (Type[T]): SQLAlchemy model class
            id_getter (Callable[[T], Any], optional): Reads the generated
                identifier for ``add_return_id``. Defaults to the model's
                primary key when it is a single column.
            procedures (ProcedureReader, optional): Stored procedure reader.
                Defaults to one using the configured schema and timeout.
            mapper (ObjectMapper, optional): Mapper for projections
        """
        self.db = db
        self.model = model
        self.id_getter = id_getter
        self.mapper = mapper or default_mapper
        self.procedures = procedures or ProcedureReader(db, mapper=self.mapper)

    def close(self) -> None:
        """Close the database session."""
        self.db.close()

    def add(self, obj: T) -> None:
        """
        Add a new record.

        Args:
            obj (T): Model instance to persist
        """
        self.db.add(obj)
        self.db.commit()
        logger.debug(f"Added {self.model.__name__}")

    def add_return_id(self, obj: T) -> Any:
        """
        Add a new record and return its identifier.

        Args:
            obj (T): Model instance to persist

        Returns:
            Any: Identifier as read by ``id_getter``

        Raises:
            IdentifierAccessError: If no ``id_getter`` was given and the
                model's primary key spans several columns
        """
        id_getter = self._resolve_id_getter()
        self.add(obj)
        return id_getter(obj)

    def add_range(self, objs: Iterable[T]) -> None:
        """
        Add several records in one commit.

        Args:
            objs (Iterable[T]): Model instances to persist
        """
        objs = list(objs)
        self.db.add_all(objs)
        self.db.commit()
        logger.debug(f"Added {len(objs)} {self.model.__name__} record(s)")

    def update(self, obj: T) -> T:
        """
        Update a record from a possibly detached instance.

        Every loaded attribute of ``obj`` is written to the row with the
        same primary key.

        Args:
            obj (T): Model instance carrying the new state

        Returns:
            T: The persistent instance attached to the session
        """
        merged = self.db.merge(obj)
        self.db.commit()
        logger.debug(f"Updated {self.model.__name__}")
        return merged

    def remove(self, obj: T) -> None:
        """
        Delete a record.

        Args:
            obj (T): Persistent model instance
        """
        self.db.delete(obj)
        self.db.commit()
        logger.debug(f"Removed {self.model.__name__}")

    def get_by_id(self, id: Any) -> Optional[T]:
        """
        Get a record by ID.

        Args:
            id (Any): Primary key value

        Returns:
            Optional[T]: Model instance if found, None otherwise
        """
        return self.db.get(self.model, id)

    def find(self, *criteria: Any, **filters: Any) -> List[T]:
        """
        Get the records matching SQL expressions and equality filters.

        Args:
            *criteria: SQLAlchemy expressions, e.g. ``Customer.age > 30``
            **filters: Column equality filters, e.g. ``city="Oslo"``

        Returns:
            List[T]: Matching model instances
        """
        statement = select(self.model).where(*criteria).filter_by(**filters)
        return list(self.db.scalars(statement).all())

    get_by = find

    def get_all(self) -> List[T]:
        """
        Get all records.

        Returns:
            List[T]: Every model instance
        """
        return list(self.db.scalars(select(self.model)).all())

    def get_cols_all(self, *columns: Any, as_type: Optional[Type] = None) -> List[Any]:
        """
        Project columns over all records.

        Args:
            *columns: Model attributes or attribute names
            as_type (Type, optional): Target type for each row. Defaults to
                the model, built transient with only the projected fields.

        Returns:
            List[Any]: One mapped object per row
        """
        return self._project(None, columns, as_type=as_type)

    def get_cols_by(self, criteria: Any, *columns: Any, as_type: Optional[Type] = None) -> List[Any]:
        """
        Project columns over the records matching criteria.

        Args:
            criteria: An expression, a sequence of expressions, or a dict of
                column equality filters
            *columns: Model attributes or attribute names
            as_type (Type, optional): Target type for each row

        Returns:
            List[Any]: One mapped object per row
        """
        return self._project(criteria, columns, as_type=as_type)

    def get_top_cols_by(
        self,
        criteria: Any,
        columns: Iterable[Any],
        top_rows_number: int,
        as_type: Optional[Type] = None
    ) -> List[Any]:
        """
        Project columns over the first records matching criteria.

        Args:
            criteria: An expression, a sequence of expressions, or a dict of
                column equality filters
            columns: Model attributes or attribute names
            top_rows_number (int): Maximum number of rows to return
            as_type (Type, optional): Target type for each row

        Returns:
            List[Any]: At most ``top_rows_number`` mapped objects
        """
        return self._project(criteria, columns, limit=top_rows_number, as_type=as_type)

    def execute_reader_procedure(
        self,
        stored_procedure: str,
        parameters: Parameters = None,
        as_type: Optional[Type] = None
    ) -> List[Any]:
        """
        Run a stored procedure and map its rows.

        Dotted column names such as ``Address.City`` fill nested objects.

        Args:
            stored_procedure (str): Procedure name without schema
            parameters: Name/value pairs, as a mapping or a sequence of pairs
            as_type (Type, optional): Target type for each row. Defaults to the model.

        Returns:
            List[Any]: One mapped object per row
        """
        return self.procedures.execute(stored_procedure, parameters, as_type or self.model)

    def _project(
        self,
        criteria: Any,
        columns: Iterable[Any],
        limit: Optional[int] = None,
        as_type: Optional[Type] = None
    ) -> List[Any]:
        columns = [self._column(column) for column in columns]
        statement = select(*columns).where(*self._conditions(criteria))
        if limit is not None:
            statement = statement.limit(limit)

        rows = self.db.execute(statement).all()
        return self.mapper.map_many(rows, as_type or self.model)

    def _column(self, column: Any) -> Any:
        if isinstance(column, str):
            return getattr(self.model, column)
        return column

    def _conditions(self, criteria: Any) -> List[Any]:
        if criteria is None:
            return []
        if isinstance(criteria, Mapping):
            return [getattr(self.model, key) == value for key, value in criteria.items()]
        if isinstance(criteria, (list, tuple)):
            return list(criteria)
        return [criteria]

    def _resolve_id_getter(self) -> Callable[[T], Any]:
        if self.id_getter is not None:
            return self.id_getter

        mapper = sa_inspect(self.model)
        if len(mapper.primary_key) != 1:
            raise IdentifierAccessError(
                f"{self.model.__name__} has a composite primary key; pass id_getter to the repository"
            )
        key = mapper.get_property_by_column(mapper.primary_key[0]).key
        return operator.attrgetter(key)
