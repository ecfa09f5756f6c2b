"""Custom exceptions for querykit.

This module defines all custom exceptions used throughout the library for
consistent error handling and clear error messaging. Errors raised by the
database driver itself (``sqlite3``, ``psycopg2``) are never wrapped.
"""

from typing import Any, Dict


# Base exception
class QueryKitError(Exception):
    """Base exception for all querykit errors.

    Attributes:
        message: Error message
        details: Additional error context as key-value pairs
    """

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        """Initialize exception with message and additional details.

        Args:
            message: Human-readable error message
            **kwargs: Additional context (e.g., query_kind, field, clause)
        """
        self.message = message
        self.details: Dict[str, Any] = kwargs
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the complete error message with details."""
        if not self.details:
            return self.message

        details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
        if self.message:
            return f"{self.message} ({details_str})"
        return details_str

    def __repr__(self) -> str:
        """Return detailed representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# Query model state exceptions
class InvalidStateError(QueryKitError):
    """Raised when a query model operation is attempted in the wrong state.

    Example:
        >>> raise InvalidStateError("Query model is not configured", query_kind="UNINITIALIZED")
    """


class QueryAlreadyInitializedError(InvalidStateError):
    """Raised when query parameters are set a second time.

    Example:
        >>> raise QueryAlreadyInitializedError("Query parameters can only be set once", query_kind="RAW")
    """


class UninitializedQueryError(InvalidStateError):
    """Raised when executing a query model that was never configured.

    Example:
        >>> raise UninitializedQueryError("Attempted to execute an uninitialized query model")
    """


class UnsupportedQueryKindError(QueryKitError):
    """Raised when a query kind value is outside the known set.

    Example:
        >>> raise UnsupportedQueryKindError("Unknown query kind", query_kind=7)
    """


# Serialization exceptions
class MalformedQueryError(QueryKitError):
    """Raised when serialized query text cannot be decoded.

    Example:
        >>> raise MalformedQueryError("Invalid query document", errors=["queryType: not an int"])
    """


# Statement building exceptions
class InvalidClauseError(QueryKitError):
    """Raised when a clause cannot be assembled into a statement.

    Example:
        >>> raise InvalidClauseError("Invalid LIMIT clause", clause="limit", value="ten")
    """


class StrictModeViolationError(InvalidClauseError):
    """Raised when strict mode rejects a selection or having clause.

    Example:
        >>> raise StrictModeViolationError("Unbalanced parentheses", clause="selection", value="a = 1) OR (1")
    """


# Cursor exceptions
class CursorError(QueryKitError):
    """Base exception for result cursor errors."""


class ColumnNotFoundError(CursorError):
    """Raised when a column name is not part of the result set.

    Example:
        >>> raise ColumnNotFoundError("Column not found", column="name", available=["id"])
    """


class CursorPositionError(CursorError):
    """Raised when reading a row while the cursor is not positioned on one.

    Example:
        >>> raise CursorPositionError("Cursor is not on a row", position=-1, count=0)
    """


# Configuration exceptions
class ConfigurationError(QueryKitError):
    """Raised when configuration is invalid or missing.

    Example:
        >>> raise ConfigurationError("Invalid configuration", setting="PG_PORT", value="abc")
    """


class MissingConfigError(ConfigurationError):
    """Raised when required configuration values are not set.

    Example:
        >>> raise MissingConfigError("Configuration not set", config_key="PG_DBNAME")
    """


# Connection exceptions
class ConnectionError(QueryKitError):
    """Raised when a database connection cannot be established.

    Example:
        >>> raise ConnectionError("Could not connect", host="localhost", port="5432")
    """
