"""
Generic data-access layer over SQLAlchemy.

Provides a generic repository with CRUD operations, column projections and
stored procedure calls whose dotted column names are mapped onto nested
objects.
"""

from infrastructure_base.exceptions import (
    ColumnConflictError,
    IdentifierAccessError,
    RepositoryError,
    UnsupportedDialectError,
)
from infrastructure_base.mapping import ObjectMapper
from infrastructure_base.procedures import Leaf, Node, ProcedureReader, row_to_tree
from infrastructure_base.repositories import AbstractRepository, RepositoryBase

__version__ = "0.1"

__all__ = [
    'AbstractRepository',
    'RepositoryBase',
    'ProcedureReader',
    'ObjectMapper',
    'Leaf',
    'Node',
    'row_to_tree',
    'RepositoryError',
    'IdentifierAccessError',
    'ColumnConflictError',
    'UnsupportedDialectError',
]
