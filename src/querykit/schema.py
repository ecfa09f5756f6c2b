"""Pydantic schemas for query clause sets and the serialized query document.

``ManagedClauses`` and ``RawClauses`` are the two mutually exclusive clause
sets a ``QueryModel`` can hold. ``QueryDocument`` is the JSON record used to
store and ship query models; ``encode_model`` and ``decode_model`` are the only
code paths that map between the two, so a renamed or added field is a change
made here and nowhere else.
"""

from typing import TYPE_CHECKING, Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from .constants import (
    FIELD_COMMENT,
    FIELD_DISTINCT,
    FIELD_GROUP_BY,
    FIELD_HAVING,
    FIELD_LIMIT,
    FIELD_PROJECTION_IN,
    FIELD_QUERY_TYPE,
    FIELD_RAW_SQL,
    FIELD_SELECTION,
    FIELD_SELECTION_ARGS,
    FIELD_SORT_ORDER,
    FIELD_STRICT,
    FIELD_TABLES,
    FIELD_TAG,
    FIELD_VERSION,
    QueryKind,
)
from .exceptions import UnsupportedQueryKindError

if TYPE_CHECKING:
    from .model import QueryModel

__all__ = ("ManagedClauses", "RawClauses", "QueryDocument", "encode_model", "decode_model")


class ManagedClauses(BaseModel):
    """Clause set of a managed query."""

    model_config = ConfigDict(frozen=True)

    tables: Optional[str] = Field(None, description="FROM clause body, may be a join expression.")
    distinct: bool = Field(False, description="SELECT DISTINCT.")
    strict: bool = Field(False, description="Ask the builder to validate selection/having text.")
    columns: Optional[List[str]] = Field(None, description="Projection; None selects all columns.")
    selection: Optional[str] = Field(None, description="WHERE clause body.")
    selection_args: Optional[List[Optional[str]]] = Field(None, description="Values bound to '?' in selection.")
    group_by: Optional[str] = Field(None, description="GROUP BY clause body.")
    having: Optional[str] = Field(None, description="HAVING clause body, only used with group_by.")
    sort_order: Optional[str] = Field(None, description="ORDER BY clause body.")
    limit: Optional[str] = Field(None, description="LIMIT clause body.")


class RawClauses(BaseModel):
    """Clause set of a raw query."""

    model_config = ConfigDict(frozen=True)

    sql: Optional[str] = Field(None, description="Statement text, not ';' terminated.")
    selection_args: Optional[List[Optional[str]]] = Field(None, description="Values bound to '?' in sql.")


class QueryDocument(BaseModel):
    """Serialized form of a query model.

    Absent and null fields are equivalent. Unknown fields are ignored so
    documents written by newer versions still load.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    query_type: Optional[StrictInt] = Field(None, alias=FIELD_QUERY_TYPE)
    version: Optional[int] = Field(None, alias=FIELD_VERSION)
    tag: Optional[str] = Field(None, alias=FIELD_TAG)
    comment: Optional[str] = Field(None, alias=FIELD_COMMENT)
    raw_sql: Optional[str] = Field(None, alias=FIELD_RAW_SQL)
    distinct: Optional[bool] = Field(None, alias=FIELD_DISTINCT)
    strict: Optional[bool] = Field(None, alias=FIELD_STRICT)
    tables: Optional[str] = Field(None, alias=FIELD_TABLES)
    projection_in: Optional[List[str]] = Field(None, alias=FIELD_PROJECTION_IN)
    selection_args: Optional[List[Optional[str]]] = Field(None, alias=FIELD_SELECTION_ARGS)
    selection: Optional[str] = Field(None, alias=FIELD_SELECTION)
    group_by: Optional[str] = Field(None, alias=FIELD_GROUP_BY)
    having: Optional[str] = Field(None, alias=FIELD_HAVING)
    sort_order: Optional[str] = Field(None, alias=FIELD_SORT_ORDER)
    limit: Optional[str] = Field(None, alias=FIELD_LIMIT)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


def encode_model(model: "QueryModel") -> QueryDocument:
    """Map a query model onto its serialized document."""
    doc = QueryDocument(
        query_type=int(model.query_kind),
        version=model.version,
        tag=model.tag,
        comment=model.comment,
        distinct=model.distinct,
        strict=model.strict,
    )
    kind = model.query_kind
    if kind == QueryKind.RAW:
        doc.raw_sql = model.raw_sql
        doc.selection_args = model.selection_args
    elif kind == QueryKind.MANAGED:
        doc.tables = model.tables
        doc.projection_in = model.columns
        doc.selection = model.selection
        doc.selection_args = model.selection_args
        doc.group_by = model.group_by
        doc.having = model.having
        doc.sort_order = model.sort_order
        doc.limit = model.limit
    return doc


def decode_model(doc: QueryDocument) -> "QueryModel":
    """Build a new query model from a serialized document.

    The document's ``queryType`` is trusted: only the fields of that kind are
    read, fields of the other kind are ignored.

    Raises:
        UnsupportedQueryKindError: If ``queryType`` is not 0, 1 or 2
    """
    from .model import QueryModel

    raw_kind = 0 if doc.query_type is None else doc.query_type
    try:
        kind = QueryKind(raw_kind)
    except ValueError:
        raise UnsupportedQueryKindError("Unknown query type in serialized query", query_type=raw_kind) from None

    model = QueryModel()
    model.version = 0 if doc.version is None else doc.version
    model.tag = doc.tag
    model.comment = doc.comment
    if kind == QueryKind.RAW:
        model.set_raw_query(doc.raw_sql, doc.selection_args)
    elif kind == QueryKind.MANAGED:
        model.set_query_params(
            doc.tables,
            doc.projection_in,
            doc.selection,
            doc.selection_args,
            doc.group_by,
            doc.having,
            doc.sort_order,
            doc.limit,
            distinct=bool(doc.distinct),
            strict=bool(doc.strict),
        )
    return model
