"""
The query model: a serializable query definition that runs itself.

A ``QueryModel`` starts uninitialized and is configured exactly once, either
as a raw SQL statement (``set_raw_query``) or as a managed query built from
clauses (``set_query_params``). After that its clauses are read-only; only the
bookkeeping metadata (version, tag, comment) can still change.

Typical usage:

    model = QueryModel()
    model.tag = "active-users"
    model.set_query_params("users", ["id", "name"], "active = ?", ["1"], sort_order="name")
    cursor = model.execute(SQLiteConnection("app.db"))
    text = model.serialize()
    same = QueryModel.deserialize(text)
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import ValidationError

from .abc import Connection
from .constants import QueryKind
from .cursor import ResultCursor, RowSet
from .exceptions import (
    MalformedQueryError,
    QueryAlreadyInitializedError,
    UninitializedQueryError,
    UnsupportedQueryKindError,
)
from .logger import Logger
from .schema import ManagedClauses, QueryDocument, RawClauses, decode_model, encode_model
from .settings import settings
from .utils import as_str_list

__all__ = ("QueryModel",)

logger = Logger(__name__)

Clauses = Union[ManagedClauses, RawClauses]


def _copy(values: Optional[List[Any]]) -> Optional[List[Any]]:
    return None if values is None else list(values)


class QueryModel:
    """Write-once query definition executable against a ``Connection``.

    Attributes:
        version: Free-form model version number, not used for execution
        tag: Free-form identifier, not used for execution
        comment: Free-form description, not used for execution
    """

    def __init__(self) -> None:
        self._kind: QueryKind = QueryKind.UNINITIALIZED
        self._clauses: Optional[Clauses] = None
        self.version: int = settings.DEFAULT_MODEL_VERSION
        self.tag: Optional[str] = None
        self.comment: Optional[str] = None

    # ------------------------------------------------------------------
    # Configuration (one shot)
    # ------------------------------------------------------------------
    def _ensure_uninitialized(self) -> None:
        if self._kind != QueryKind.UNINITIALIZED:
            raise QueryAlreadyInitializedError(
                "Query parameters can only be set once", query_kind=self._kind.name, tag=self.tag
            )

    def set_raw_query(self, sql: Optional[str], selection_args: Optional[Sequence[Any]] = None) -> None:
        """Configure this model as a raw SQL query.

        Args:
            sql: Statement text. Must not be ';' terminated.
            selection_args: Values bound, as strings, to the ``?`` placeholders
                of ``sql`` in order.

        Raises:
            QueryAlreadyInitializedError: If the model was already configured
            TypeError: If ``selection_args`` is a single string
        """
        self._ensure_uninitialized()
        self._clauses = RawClauses(sql=sql, selection_args=as_str_list(selection_args))
        self._kind = QueryKind.RAW

    def set_query_params(
        self,
        tables: Optional[str],
        columns: Optional[Sequence[str]] = None,
        selection: Optional[str] = None,
        selection_args: Optional[Sequence[Any]] = None,
        group_by: Optional[str] = None,
        having: Optional[str] = None,
        sort_order: Optional[str] = None,
        limit: Optional[str] = None,
        *,
        distinct: bool = False,
        strict: bool = False,
    ) -> None:
        """Configure this model as a managed query.

        Args:
            tables: Tables to query, e.g. ``"foo, bar"`` or
                ``"foo LEFT OUTER JOIN bar ON (foo.id = bar.foo_id)"``.
            columns: Columns to return. None returns all columns.
            selection: WHERE clause body (without ``WHERE``). None returns all rows.
            selection_args: Values bound, as strings, to the ``?`` placeholders
                of ``selection`` in order.
            group_by: GROUP BY clause body. None leaves rows ungrouped.
            having: HAVING clause body. Only applied together with ``group_by``.
            sort_order: ORDER BY clause body. None uses the default order.
            limit: LIMIT clause body, e.g. ``"10"`` or ``"20,10"``.
            distinct: Return only distinct rows.
            strict: Ask the statement builder to validate selection and
                having text, when the connection supports it.

        Raises:
            QueryAlreadyInitializedError: If the model was already configured
            TypeError: If ``selection_args`` is a single string
        """
        self._ensure_uninitialized()
        self._clauses = ManagedClauses(
            tables=tables,
            distinct=distinct,
            strict=strict,
            columns=None if columns is None else list(columns),
            selection=selection,
            selection_args=as_str_list(selection_args),
            group_by=group_by,
            having=having,
            sort_order=sort_order,
            limit=limit,
        )
        self._kind = QueryKind.MANAGED

    @classmethod
    def raw(cls, sql: str, selection_args: Optional[Sequence[Any]] = None, **metadata: Any) -> "QueryModel":
        """Return a new raw query model. ``metadata`` may set version, tag and comment."""
        model = cls()._apply_metadata(**metadata)
        model.set_raw_query(sql, selection_args)
        return model

    @classmethod
    def managed(cls, tables: str, *args: Any, **kwargs: Any) -> "QueryModel":
        """Return a new managed query model; arguments as for ``set_query_params``.

        ``version``, ``tag`` and ``comment`` keywords set metadata.
        """
        metadata = {k: kwargs.pop(k) for k in ("version", "tag", "comment") if k in kwargs}
        model = cls()._apply_metadata(**metadata)
        model.set_query_params(tables, *args, **kwargs)
        return model

    def _apply_metadata(
        self, version: Optional[int] = None, tag: Optional[str] = None, comment: Optional[str] = None
    ) -> "QueryModel":
        if version is not None:
            self.version = version
        self.tag = tag
        self.comment = comment
        return self

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def query_kind(self) -> QueryKind:
        return self._kind

    @property
    def is_initialized(self) -> bool:
        return self._kind != QueryKind.UNINITIALIZED

    @property
    def _managed(self) -> Optional[ManagedClauses]:
        return self._clauses if isinstance(self._clauses, ManagedClauses) else None

    @property
    def raw_sql(self) -> Optional[str]:
        return self._clauses.sql if isinstance(self._clauses, RawClauses) else None

    @property
    def selection_args(self) -> Optional[List[Optional[str]]]:
        return None if self._clauses is None else _copy(self._clauses.selection_args)

    @property
    def tables(self) -> Optional[str]:
        return self._managed.tables if self._managed else None

    @property
    def distinct(self) -> bool:
        return self._managed.distinct if self._managed else False

    @property
    def strict(self) -> bool:
        return self._managed.strict if self._managed else False

    @property
    def columns(self) -> Optional[List[str]]:
        return _copy(self._managed.columns) if self._managed else None

    @property
    def selection(self) -> Optional[str]:
        return self._managed.selection if self._managed else None

    @property
    def group_by(self) -> Optional[str]:
        return self._managed.group_by if self._managed else None

    @property
    def having(self) -> Optional[str]:
        return self._managed.having if self._managed else None

    @property
    def sort_order(self) -> Optional[str]:
        return self._managed.sort_order if self._managed else None

    @property
    def limit(self) -> Optional[str]:
        return self._managed.limit if self._managed else None

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------
    def execute(self, connection: Connection) -> ResultCursor:
        """Run the query on ``connection``.

        The returned cursor is already moved to its first row and keeps a
        reference to this model. Errors raised by the connection or its
        statement builder propagate unchanged.

        Raises:
            UninitializedQueryError: If the model was never configured
            UnsupportedQueryKindError: If the model holds an unknown query kind
        """
        kind = self._kind
        rows: RowSet
        if kind == QueryKind.MANAGED:
            clauses = self._clauses
            builder = connection.new_statement_builder()
            builder.set_tables(clauses.tables)
            builder.set_distinct(clauses.distinct)
            if connection.supports_strict_mode:
                builder.set_strict(clauses.strict)
            logger.debug("Executing managed query tag=%s tables=%s", self.tag, clauses.tables)
            rows = builder.query(
                connection,
                clauses.columns,
                clauses.selection,
                clauses.selection_args,
                clauses.group_by,
                clauses.having,
                clauses.sort_order,
                clauses.limit,
            )
        elif kind == QueryKind.RAW:
            logger.debug("Executing raw query tag=%s", self.tag)
            rows = connection.raw_query(self._clauses.sql, self._clauses.selection_args)
        elif kind == QueryKind.UNINITIALIZED:
            raise UninitializedQueryError("Attempted to execute an uninitialized query model", tag=self.tag)
        else:
            raise UnsupportedQueryKindError("Attempted to execute a query of an unknown kind", query_kind=kind)

        rows.move_to_first()
        return ResultCursor(rows, self)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_document(self) -> QueryDocument:
        return encode_model(self)

    def to_dict(self) -> Dict[str, Any]:
        """Return the serialized document as a dict keyed by wire field names."""
        return encode_model(self).to_dict()

    def serialize(self) -> str:
        """Return the JSON representation of this model; see ``deserialize``."""
        return encode_model(self).to_json()

    @classmethod
    def from_dict(cls, data: Any) -> "QueryModel":
        """Build a model from a dict keyed by wire field names.

        Raises:
            MalformedQueryError: If ``data`` does not match the document schema
            UnsupportedQueryKindError: If ``queryType`` is unknown
        """
        try:
            doc = QueryDocument.model_validate(data)
        except ValidationError as e:
            raise MalformedQueryError("Invalid query document", errors=_error_summary(e)) from e
        return decode_model(doc)

    @classmethod
    def deserialize(cls, text: Union[str, bytes]) -> "QueryModel":
        """Build a model from the JSON produced by ``serialize``.

        Raises:
            MalformedQueryError: If ``text`` is not a JSON object matching the
                document schema
            UnsupportedQueryKindError: If ``queryType`` is unknown
        """
        if not isinstance(text, (str, bytes, bytearray)):
            raise MalformedQueryError("Serialized query must be text", type=type(text).__name__)
        try:
            doc = QueryDocument.model_validate_json(text)
        except ValidationError as e:
            raise MalformedQueryError("Invalid query document", errors=_error_summary(e)) from e
        return decode_model(doc)

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueryModel):
            return NotImplemented
        return (
            self._kind == other._kind
            and self.version == other.version
            and self.tag == other.tag
            and self.comment == other.comment
            and self._clauses == other._clauses
        )

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"QueryModel(kind={self._kind.name}, version={self.version}, tag={self.tag!r}, "
            f"comment={self.comment!r}, clauses={self._clauses!r})"
        )


def _error_summary(error: ValidationError) -> List[str]:
    out = []
    for item in error.errors():
        loc = ".".join(str(p) for p in item.get("loc", ())) or "<root>"
        out.append(f"{loc}: {item.get('msg')}")
    return out
