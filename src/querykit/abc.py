"""Abstract collaborators a query model executes against.

A ``Connection`` runs raw statements and hands out ``StatementBuilder``
instances for managed queries. Both return a ``RowSet``.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from .cursor import RowSet

__all__ = ("Connection", "StatementBuilder")


class StatementBuilder(ABC):
    """Assembles and runs a SELECT statement from individual clauses."""

    @abstractmethod
    def set_tables(self, tables: Optional[str]) -> None:
        """Set the FROM clause. May be a join expression, e.g. ``"a JOIN b ON (a.id = b.a_id)"``."""
        raise NotImplementedError

    @abstractmethod
    def set_distinct(self, distinct: bool) -> None:
        raise NotImplementedError

    @abstractmethod
    def set_strict(self, strict: bool) -> None:
        """Enable validation of selection/having text before running."""
        raise NotImplementedError

    @abstractmethod
    def query(
        self,
        connection: "Connection",
        columns: Optional[Sequence[str]],
        selection: Optional[str],
        selection_args: Optional[Sequence[str]],
        group_by: Optional[str],
        having: Optional[str],
        sort_order: Optional[str],
        limit: Optional[str],
    ) -> RowSet:
        """Build the statement and run it on ``connection``."""
        raise NotImplementedError


class Connection(ABC):
    """Database connection capability consumed by ``QueryModel.execute``."""

    #: Whether builders from this connection honour ``set_strict``.
    supports_strict_mode: bool = False

    @abstractmethod
    def raw_query(self, sql: str, selection_args: Optional[Sequence[str]] = None) -> RowSet:
        """Run ``sql`` verbatim, binding ``selection_args`` to ``?`` placeholders in order."""
        raise NotImplementedError

    @abstractmethod
    def new_statement_builder(self) -> StatementBuilder:
        raise NotImplementedError
