"""
Query kinds and wire field names shared by the model and its JSON schema.
"""

from enum import IntEnum


class QueryKind(IntEnum):
    UNINITIALIZED = 0
    MANAGED = 1
    RAW = 2


# Stable field names of the serialized query document.
FIELD_QUERY_TYPE = "queryType"
FIELD_VERSION = "version"
FIELD_TAG = "tag"
FIELD_COMMENT = "comment"
FIELD_RAW_SQL = "rawSql"
FIELD_DISTINCT = "distinct"
FIELD_STRICT = "strict"
FIELD_TABLES = "tables"
FIELD_PROJECTION_IN = "projectionIn"
FIELD_SELECTION_ARGS = "selectionArgs"
FIELD_SELECTION = "selection"
FIELD_GROUP_BY = "groupBy"
FIELD_HAVING = "having"
FIELD_SORT_ORDER = "sortOrder"
FIELD_LIMIT = "limit"
