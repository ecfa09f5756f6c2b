"""Fluent construction of query models.

``QueryBuilder`` collects clauses through chained calls and produces a
configured ``QueryModel`` from ``build()``. A builder is single use: once it
has built a model it refuses further calls.

Usage::

    model = (
        QueryBuilder()
        .tables("orders o JOIN customers c ON (o.customer_id = c.id)")
        .columns("o.id", "c.name")
        .where("o.total > ?", 100)
        .order_by("o.id DESC")
        .limit(20)
        .tag("big-orders")
        .build()
    )
"""

from typing import Any, List, Optional

from .exceptions import InvalidStateError
from .model import QueryModel

__all__ = ("QueryBuilder",)


class QueryBuilder:
    """Chained builder for raw or managed query models."""

    def __init__(self) -> None:
        self._built = False
        self._raw_sql: Optional[str] = None
        self._is_raw = False
        self._managed_touched = False
        self._tables: Optional[str] = None
        self._columns: Optional[List[str]] = None
        self._selection: Optional[str] = None
        self._args: Optional[List[Any]] = None
        self._group_by: Optional[str] = None
        self._having: Optional[str] = None
        self._sort_order: Optional[str] = None
        self._limit: Optional[str] = None
        self._distinct = False
        self._strict = False
        self._version: Optional[int] = None
        self._tag: Optional[str] = None
        self._comment: Optional[str] = None

    def _check_open(self) -> None:
        if self._built:
            raise InvalidStateError("QueryBuilder has already built its model")

    def _managed(self) -> "QueryBuilder":
        self._check_open()
        if self._is_raw:
            raise InvalidStateError("Cannot add managed clauses to a raw query")
        self._managed_touched = True
        return self

    # Metadata
    def version(self, version: int) -> "QueryBuilder":
        self._check_open()
        self._version = version
        return self

    def tag(self, tag: str) -> "QueryBuilder":
        self._check_open()
        self._tag = tag
        return self

    def comment(self, comment: str) -> "QueryBuilder":
        self._check_open()
        self._comment = comment
        return self

    # Raw
    def raw(self, sql: str, *args: Any) -> "QueryBuilder":
        self._check_open()
        if self._managed_touched or self._is_raw:
            raise InvalidStateError("A raw query cannot be combined with other query clauses")
        self._is_raw = True
        self._raw_sql = sql
        self._args = list(args)
        return self

    # Managed
    def tables(self, tables: str) -> "QueryBuilder":
        self._managed()._tables = tables
        return self

    def columns(self, *columns: str) -> "QueryBuilder":
        self._managed()._columns = list(columns)
        return self

    def where(self, selection: str, *args: Any) -> "QueryBuilder":
        """Add a filter; multiple calls are joined with AND."""
        self._managed()
        if self._selection is None:
            self._selection = selection
            self._args = list(args)
        else:
            self._selection = f"({self._selection}) AND ({selection})"
            self._args = (self._args or []) + list(args)
        return self

    def group_by(self, group_by: str) -> "QueryBuilder":
        self._managed()._group_by = group_by
        return self

    def having(self, having: str) -> "QueryBuilder":
        self._managed()._having = having
        return self

    def order_by(self, sort_order: str) -> "QueryBuilder":
        self._managed()._sort_order = sort_order
        return self

    def limit(self, limit: Any, offset: Optional[int] = None) -> "QueryBuilder":
        self._managed()._limit = str(limit) if offset is None else f"{offset},{limit}"
        return self

    def distinct(self, distinct: bool = True) -> "QueryBuilder":
        self._managed()._distinct = distinct
        return self

    def strict(self, strict: bool = True) -> "QueryBuilder":
        self._managed()._strict = strict
        return self

    def build(self) -> QueryModel:
        """Return the configured model and close this builder.

        Raises:
            InvalidStateError: If called twice or before any query was described
        """
        self._check_open()
        if not self._is_raw and not self._managed_touched:
            raise InvalidStateError("Nothing to build: call raw() or add managed clauses first")
        model = QueryModel()
        if self._version is not None:
            model.version = self._version
        model.tag = self._tag
        model.comment = self._comment
        if self._is_raw:
            model.set_raw_query(self._raw_sql, self._args)
        else:
            model.set_query_params(
                self._tables,
                self._columns,
                self._selection,
                self._args,
                self._group_by,
                self._having,
                self._sort_order,
                self._limit,
                distinct=self._distinct,
                strict=self._strict,
            )
        self._built = True
        return model
