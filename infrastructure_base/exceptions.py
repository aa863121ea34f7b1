"""
Custom exceptions for the repository layer.

Database, driver and validation failures are not wrapped: they propagate
unchanged from SQLAlchemy, the DBAPI driver or pydantic. Only the errors the
repository layer raises on its own live here.
"""

class RepositoryError(Exception):
    """Base exception for repository-related errors."""
    pass

class IdentifierAccessError(RepositoryError):
    """Raised when a repository cannot determine how to read an entity's identifier."""
    pass

class ColumnConflictError(RepositoryError, ValueError):
    """Raised when two result columns resolve to the same key in a result tree."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Conflicting result columns for key '{path}'")

class UnsupportedDialectError(RepositoryError):
    """Raised when no stored procedure adapter is registered for a dialect."""

    def __init__(self, dialect_name: str):
        self.dialect_name = dialect_name
        super().__init__(f"No stored procedure adapter registered for dialect '{dialect_name}'")
