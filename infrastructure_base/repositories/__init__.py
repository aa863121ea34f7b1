"""
This package contains the generic repository implementation.

Repositories provide a clean abstraction layer for database access,
implementing the repository pattern to separate business logic from
data access concerns.
"""

from infrastructure_base.repositories.interface import AbstractRepository
from infrastructure_base.repositories.base import RepositoryBase

__all__ = ['AbstractRepository', 'RepositoryBase']
