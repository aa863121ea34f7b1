"""
Stored procedure reader.

Runs a stored procedure through the session's connection, folds every row
into a result tree (see ``procedures.tree``) and maps the trees onto the
requested type.
"""

from typing import Any, Iterable, List, Mapping, Optional, Tuple, Type, TypeVar, Union

from sqlalchemy.orm import Session

from infrastructure_base.adapters.procedures import ProcedureAdapter
from infrastructure_base.adapters.procedures.factory import ProcedureAdapterFactory
from infrastructure_base.mapping import ObjectMapper, default_mapper
from infrastructure_base.procedures.tree import Node, row_to_tree
from infrastructure_base.utils.config import get_settings
from infrastructure_base.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar('T')

Parameters = Union[Mapping[str, Any], Iterable[Tuple[str, Any]], None]

class ProcedureReader:
    """
    Executes stored procedures and maps their rows.

    Attributes:
        session (Session): SQLAlchemy session providing the connection
        schema (str): Schema prefix for procedure names
        command_timeout (int): Timeout in seconds for each call
        skip_nulls (bool): Leave null columns out of the result trees
    """

    def __init__(
        self,
        session: Session,
        schema: Optional[str] = None,
        command_timeout: Optional[int] = None,
        mapper: Optional[ObjectMapper] = None,
        adapter: Optional[ProcedureAdapter] = None,
        skip_nulls: bool = True
    ):
        """
        Initialize the reader.

        Args:
            session (Session): SQLAlchemy session
            schema (str, optional): Schema prefix, PROCEDURE_SCHEMA by default
            command_timeout (int, optional): Seconds, COMMAND_TIMEOUT by default
            mapper (ObjectMapper, optional): Mapper used for the rows
            adapter (ProcedureAdapter, optional): Adapter to use instead of
                the one registered for the session's dialect
            skip_nulls (bool): Leave null columns out of the result trees
        """
        settings = get_settings()
        self.session = session
        self.schema = settings.PROCEDURE_SCHEMA if schema is None else schema
        self.command_timeout = settings.COMMAND_TIMEOUT if command_timeout is None else command_timeout
        self.mapper = mapper or default_mapper
        self.adapter = adapter
        self.skip_nulls = skip_nulls

    def execute(
        self,
        stored_procedure: str,
        parameters: Parameters = None,
        as_type: Type[T] = dict
    ) -> List[T]:
        """
        Execute a stored procedure and map each row onto ``as_type``.

        Args:
            stored_procedure (str): Procedure name without schema
            parameters: Name/value pairs, as a mapping or a sequence of pairs
            as_type (Type[T]): Target type for each row

        Returns:
            List[T]: One mapped object per row
        """
        trees = self.execute_trees(stored_procedure, parameters)
        return [self.mapper.map(tree.to_dict(), as_type) for tree in trees]

    def execute_trees(self, stored_procedure: str, parameters: Parameters = None) -> List[Node]:
        """
        Execute a stored procedure and return one result tree per row.

        The rows are fully read before the result is released.

        Args:
            stored_procedure (str): Procedure name without schema
            parameters: Name/value pairs, as a mapping or a sequence of pairs

        Returns:
            List[Node]: One tree per row
        """
        params = self._bind_parameters(parameters)
        connection = self.session.connection()
        adapter = self.adapter or ProcedureAdapterFactory.get_adapter(connection.dialect.name)
        statement = adapter.build_statement(self.schema, stored_procedure, list(params))

        logger.debug(f"Executing stored procedure {adapter.qualified_name(self.schema, stored_procedure)} with {len(params)} parameter(s)")
        with adapter.command_timeout(connection, self.command_timeout):
            result = connection.execute(statement, params)
            try:
                columns = list(result.keys())
                trees = [row_to_tree(zip(columns, row), self.skip_nulls) for row in result]
            finally:
                result.close()

        logger.debug(f"Stored procedure {stored_procedure} returned {len(trees)} row(s)")
        return trees

    @staticmethod
    def _bind_parameters(parameters: Parameters) -> dict:
        """
        Normalize parameters to a dict keyed by bind name.

        Raises:
            ValueError: If two parameters share a name once the @ prefix is dropped
        """
        if parameters is None:
            return {}
        pairs = parameters.items() if isinstance(parameters, Mapping) else parameters

        params = {}
        for name, value in pairs:
            bind_name = name.removeprefix("@")
            if bind_name in params:
                raise ValueError(f"Duplicate stored procedure parameter: {bind_name}")
            params[bind_name] = value
        return params
