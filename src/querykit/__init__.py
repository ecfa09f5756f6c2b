"""
querykit: serializable query models that execute themselves.

Exposes the ``QueryModel``, its fluent ``QueryBuilder``, the result cursor and
the connection contracts.
"""

from .abc import Connection, StatementBuilder
from .builder import QueryBuilder
from .constants import QueryKind
from .cursor import ResultCursor, RowSet
from .model import QueryModel
from .statement import SelectStatementBuilder

__version__ = "0.1.0"

__all__ = [
    "QueryModel",
    "QueryBuilder",
    "QueryKind",
    "Connection",
    "StatementBuilder",
    "SelectStatementBuilder",
    "ResultCursor",
    "RowSet",
]
