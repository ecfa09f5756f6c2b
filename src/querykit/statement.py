"""Default SELECT statement builder.

Assembles the clauses of a managed query into one SQL string:

    SELECT [DISTINCT] <columns | *> FROM <tables>
    [WHERE (<selection>)] [GROUP BY ...] [HAVING ...] [ORDER BY ...] [LIMIT ...]

Clause bodies are inserted as given. The checks performed are the LIMIT
shape, membership of requested columns in the projection map when one is set
and, in strict mode, parenthesis balance of the selection and having text.
"""

from typing import Dict, List, Optional, Sequence

from .abc import Connection, StatementBuilder
from .cursor import RowSet
from .exceptions import InvalidClauseError, StrictModeViolationError
from .logger import Logger
from .utils import has_balanced_parentheses, is_valid_limit

__all__ = ("SelectStatementBuilder",)


class SelectStatementBuilder(StatementBuilder):
    """Build and run SELECT statements for managed query models.

    Attributes:
        tables: FROM clause body
        distinct: Emit SELECT DISTINCT
        strict: Reject selection/having text with unbalanced parentheses
        projection_map: Optional column allow-list mapping a requested column
            name to the expression selected for it
    """

    def __init__(self, projection_map: Optional[Dict[str, str]] = None) -> None:
        self.tables: Optional[str] = None
        self.distinct = False
        self.strict = False
        self.projection_map = projection_map
        self.logger = Logger(self.__class__.__name__)

    def set_tables(self, tables: Optional[str]) -> None:
        self.tables = tables

    def set_distinct(self, distinct: bool) -> None:
        self.distinct = distinct

    def set_strict(self, strict: bool) -> None:
        self.strict = strict

    def set_projection_map(self, projection_map: Optional[Dict[str, str]]) -> None:
        self.projection_map = projection_map

    def _compute_projection(self, columns: Optional[Sequence[str]]) -> List[str]:
        if self.projection_map is None:
            return list(columns) if columns else []
        if not columns:
            return list(self.projection_map.values())
        projection: List[str] = []
        for column in columns:
            expr = self.projection_map.get(column)
            if expr is None:
                raise InvalidClauseError("Column is not in the projection map", clause="columns", value=column)
            projection.append(expr)
        return projection

    def _render_limit(self, limit: str) -> str:
        return f"LIMIT {limit.strip()}"

    def _check_strict(self, clause: str, value: Optional[str]) -> None:
        if not has_balanced_parentheses(value):
            raise StrictModeViolationError("Unbalanced parentheses in clause", clause=clause, value=value)

    def build_query(
        self,
        columns: Optional[Sequence[str]] = None,
        selection: Optional[str] = None,
        group_by: Optional[str] = None,
        having: Optional[str] = None,
        sort_order: Optional[str] = None,
        limit: Optional[str] = None,
    ) -> str:
        """Return the SELECT statement for the given clauses without running it.

        Raises:
            InvalidClauseError: If no tables are set, LIMIT is not numeric or a
                requested column is missing from the projection map
            StrictModeViolationError: In strict mode, if selection or having
                has unbalanced parentheses
        """
        if not self.tables:
            raise InvalidClauseError("Tables must be set before building a query", clause="tables")
        if limit and not is_valid_limit(limit):
            raise InvalidClauseError("Invalid LIMIT clause", clause="limit", value=limit)
        if self.strict:
            self._check_strict("selection", selection)
            self._check_strict("having", having)

        parts = ["SELECT"]
        if self.distinct:
            parts.append("DISTINCT")
        projection = self._compute_projection(columns)
        parts.append(", ".join(projection) if projection else "*")
        parts.append(f"FROM {self.tables}")
        if selection:
            parts.append(f"WHERE ({selection})")
        if group_by:
            parts.append(f"GROUP BY {group_by}")
            if having:
                parts.append(f"HAVING {having}")
        elif having:
            self.logger.debug("Ignoring HAVING clause without GROUP BY: %s", having)
        if sort_order:
            parts.append(f"ORDER BY {sort_order}")
        if limit:
            parts.append(self._render_limit(limit))
        return " ".join(parts)

    def query(
        self,
        connection: Connection,
        columns: Optional[Sequence[str]],
        selection: Optional[str],
        selection_args: Optional[Sequence[str]],
        group_by: Optional[str],
        having: Optional[str],
        sort_order: Optional[str],
        limit: Optional[str],
    ) -> RowSet:
        sql = self.build_query(columns, selection, group_by, having, sort_order, limit)
        self.logger.debug("Running managed statement: %s", sql)
        return connection.raw_query(sql, selection_args)
