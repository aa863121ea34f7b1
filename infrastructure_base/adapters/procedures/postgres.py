"""
PostgreSQL stored procedure adapter.

Procedures returning rows are set-returning functions in PostgreSQL, so
they are selected from with named argument notation.
"""

from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.sql.elements import TextClause

from infrastructure_base.adapters.procedures import ProcedureAdapter, check_parameter

class PostgresAdapter(ProcedureAdapter):
    """PostgreSQL adapter using ``SELECT * FROM fn(name => value)``."""

    def build_statement(
        self,
        schema: Optional[str],
        name: str,
        param_names: Sequence[str]
    ) -> TextClause:
        arguments = ", ".join(f"{check_parameter(p)} => :{p}" for p in param_names)
        return text(f"SELECT * FROM {self.qualified_name(schema, name)}({arguments})")

    @contextmanager
    def command_timeout(self, connection: Connection, seconds: int) -> Iterator[None]:
        previous = connection.execute(text("SHOW statement_timeout")).scalar()
        connection.execute(
            text("SELECT set_config('statement_timeout', :value, true)"),
            {"value": str(seconds * 1000)}
        )
        # An aborted transaction rejects the restore; its rollback clears the local setting
        yield
        connection.execute(
            text("SELECT set_config('statement_timeout', :value, true)"),
            {"value": previous}
        )
