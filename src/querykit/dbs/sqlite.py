"""SQLite connection for query models.

Runs statements through the standard library ``sqlite3`` module, which uses
the same ``?`` placeholder style as the query model, so statements are passed
through untouched.
"""

import sqlite3
from typing import Any, Dict, Optional, Sequence

from querykit.abc import Connection
from querykit.cursor import RowSet
from querykit.logger import Logger
from querykit.settings import settings as api_settings
from querykit.statement import SelectStatementBuilder


class SQLiteConnection(Connection):
    """Connection backed by ``sqlite3``.

    Either opens ``database`` lazily on first use (and then owns it) or wraps an
    already open ``sqlite3.Connection`` passed as ``client`` (owned by the caller).

    Attributes:
        database: Path or ``":memory:"``
        supports_strict_mode: Whether managed queries may enable strict mode
        projection_map: Optional column allow-list handed to statement builders
    """

    def __init__(
        self,
        database: Optional[str] = None,
        *,
        client: Optional[sqlite3.Connection] = None,
        supports_strict_mode: Optional[bool] = None,
        projection_map: Optional[Dict[str, str]] = None,
    ) -> None:
        self.database = database or api_settings.SQLITE_DATABASE
        self._client = client
        self._owns_client = client is None
        self.supports_strict_mode = (
            api_settings.SQLITE_STRICT_MODE if supports_strict_mode is None else supports_strict_mode
        )
        self.projection_map = projection_map
        self.logger = Logger(self.__class__.__name__)

    @property
    def client(self) -> sqlite3.Connection:
        """Lazily open and return the underlying ``sqlite3`` connection."""
        if self._client is None:
            self._client = sqlite3.connect(self.database)
            self.logger.message("SQLite connection opened (database=%s).", self.database)
        return self._client

    def raw_query(self, sql: str, selection_args: Optional[Sequence[Any]] = None) -> RowSet:
        cur = self.client.execute(sql, list(selection_args or []))
        try:
            columns = [d[0] for d in cur.description or []]
            rows = cur.fetchall()
        finally:
            cur.close()
        return RowSet(columns, rows)

    def new_statement_builder(self) -> SelectStatementBuilder:
        return SelectStatementBuilder(projection_map=self.projection_map)

    def close(self) -> None:
        """Close the connection if this object opened it."""
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    def __enter__(self) -> "SQLiteConnection":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
