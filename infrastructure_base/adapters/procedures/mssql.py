"""
SQL Server stored procedure adapter.
"""

from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.sql.elements import TextClause

from infrastructure_base.adapters.procedures import ProcedureAdapter, check_parameter
from infrastructure_base.utils.logger import get_logger

logger = get_logger(__name__)

class MSSQLAdapter(ProcedureAdapter):
    """SQL Server adapter using ``EXEC`` with named parameters."""

    def build_statement(
        self,
        schema: Optional[str],
        name: str,
        param_names: Sequence[str]
    ) -> TextClause:
        arguments = ", ".join(f"@{check_parameter(p)} = :{p}" for p in param_names)
        # NOCOUNT keeps row-count messages from hiding the result set
        sql = f"SET NOCOUNT ON; EXEC {self.qualified_name(schema, name)}"
        if arguments:
            sql = f"{sql} {arguments}"
        return text(sql)

    @contextmanager
    def command_timeout(self, connection: Connection, seconds: int) -> Iterator[None]:
        dbapi_connection = connection.connection.dbapi_connection
        if not hasattr(dbapi_connection, "timeout"):
            logger.debug("Driver has no query timeout, running without one")
            yield
            return

        previous = dbapi_connection.timeout
        dbapi_connection.timeout = seconds
        try:
            yield
        finally:
            dbapi_connection.timeout = previous
