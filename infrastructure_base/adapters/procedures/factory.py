"""
Stored procedure adapter factory.

This module maps SQLAlchemy dialect names to the adapter that knows how to
call stored procedures on that backend.
"""

import logging
from typing import Dict

from infrastructure_base.adapters.procedures import ProcedureAdapter
from infrastructure_base.adapters.procedures.mssql import MSSQLAdapter
from infrastructure_base.adapters.procedures.mysql import MySQLAdapter
from infrastructure_base.adapters.procedures.postgres import PostgresAdapter
from infrastructure_base.exceptions import UnsupportedDialectError

logger = logging.getLogger(__name__)

class ProcedureAdapterFactory:
    """Registry of stored procedure adapters keyed by dialect name."""

    _adapters: Dict[str, ProcedureAdapter] = {
        "mssql": MSSQLAdapter(),
        "postgresql": PostgresAdapter(),
        "mysql": MySQLAdapter(),
        "mariadb": MySQLAdapter(),
    }

    @classmethod
    def get_adapter(cls, dialect_name: str) -> ProcedureAdapter:
        """Get the adapter for a dialect.

        Args:
            dialect_name: SQLAlchemy dialect name, e.g. ``mssql``

        Returns:
            ProcedureAdapter: The registered adapter

        Raises:
            UnsupportedDialectError: If no adapter is registered for the dialect
        """
        try:
            return cls._adapters[dialect_name]
        except KeyError:
            raise UnsupportedDialectError(dialect_name) from None

    @classmethod
    def register(cls, dialect_name: str, adapter: ProcedureAdapter) -> None:
        """Register or replace the adapter for a dialect."""
        cls._adapters[dialect_name] = adapter
        logger.info(f"Registered stored procedure adapter for {dialect_name}")

    @classmethod
    def unregister(cls, dialect_name: str) -> None:
        """Remove the adapter for a dialect if one is registered."""
        if cls._adapters.pop(dialect_name, None) is not None:
            logger.info(f"Removed stored procedure adapter for {dialect_name}")
