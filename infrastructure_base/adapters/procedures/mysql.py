"""
MySQL / MariaDB stored procedure adapter.

MySQL has no timeout that applies to ``CALL``, so the default no-op
``command_timeout`` is kept.
"""

from typing import Optional, Sequence

from sqlalchemy import text
from sqlalchemy.sql.elements import TextClause

from infrastructure_base.adapters.procedures import ProcedureAdapter, check_parameter

class MySQLAdapter(ProcedureAdapter):
    """MySQL adapter using ``CALL`` with positional parameters."""

    def build_statement(
        self,
        schema: Optional[str],
        name: str,
        param_names: Sequence[str]
    ) -> TextClause:
        arguments = ", ".join(f":{check_parameter(p)}" for p in param_names)
        return text(f"CALL {self.qualified_name(schema, name)}({arguments})")
