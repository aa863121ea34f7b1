"""
Stored procedure adapters for the supported database dialects.

Each adapter knows how its backend invokes a stored procedure that returns
rows and, where the backend offers one, how to bound the command's run time.
"""

import re
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

from sqlalchemy.engine import Connection
from sqlalchemy.sql.elements import TextClause

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_$#@]*$")
PARAMETER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

class ProcedureAdapter(ABC):
    """Abstract base class for stored procedure adapters."""

    @abstractmethod
    def build_statement(
        self,
        schema: Optional[str],
        name: str,
        param_names: Sequence[str]
    ) -> TextClause:
        """Build the statement invoking a procedure.

        Args:
            schema: Schema the procedure lives in, or None for the default
            name: Procedure name
            param_names: Names of the bind parameters, in call order

        Returns:
            TextClause: Statement with one bind parameter per name
        """
        pass

    @contextmanager
    def command_timeout(self, connection: Connection, seconds: int) -> Iterator[None]:
        """Bound the run time of statements executed inside the block.

        The default does nothing, for backends without a per-command timeout.

        Args:
            connection: Connection the procedure runs on
            seconds: Timeout in seconds
        """
        yield

    @staticmethod
    def qualified_name(schema: Optional[str], name: str) -> str:
        """Return ``schema.name`` after validating both identifiers."""
        check_identifier(name)
        if schema:
            check_identifier(schema)
            return f"{schema}.{name}"
        return name

def check_identifier(identifier: str) -> str:
    """Reject procedure or schema names that are not plain identifiers.

    Raises:
        ValueError: If the identifier could alter the statement
    """
    if not IDENTIFIER_PATTERN.match(identifier or ""):
        raise ValueError(f"Invalid identifier: {identifier!r}")
    return identifier

def check_parameter(name: str) -> str:
    """Reject parameter names that cannot be used as bind parameters.

    Raises:
        ValueError: If the name is not a plain identifier
    """
    if not PARAMETER_PATTERN.match(name or ""):
        raise ValueError(f"Invalid parameter name: {name!r}")
    return name
