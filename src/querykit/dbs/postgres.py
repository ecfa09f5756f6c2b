"""PostgreSQL connection for query models.

Query models bind arguments to ``?`` placeholders; psycopg2 expects
pyformat ``%s`` markers, so statements are rewritten before they run.
"""

from typing import Any, Dict, Optional, Sequence

import psycopg2

from querykit.abc import Connection
from querykit.cursor import RowSet
from querykit.exceptions import ConnectionError, MissingConfigError
from querykit.logger import Logger
from querykit.settings import settings as api_settings
from querykit.statement import SelectStatementBuilder
from querykit.utils import split_limit, translate_placeholders


class PostgresStatementBuilder(SelectStatementBuilder):
    """SELECT builder emitting PostgreSQL's ``LIMIT count OFFSET n`` form.

    PostgreSQL rejects the ``LIMIT n,count`` shorthand stored in query models.
    """

    def _render_limit(self, limit: str) -> str:
        offset, count = split_limit(limit)
        if offset is None:
            return f"LIMIT {count}"
        return f"LIMIT {count} OFFSET {offset}"


class PostgresConnection(Connection):
    """Connection backed by ``psycopg2``.

    Connection parameters default to the ``PG_*`` settings. An existing
    psycopg2 connection may be injected as ``client``; it is then never closed
    by this object.
    """

    supports_strict_mode = True

    def __init__(
        self,
        dbname: Optional[str] = None,
        *,
        host: Optional[str] = None,
        port: Optional[str] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        client: Any = None,
        projection_map: Optional[Dict[str, str]] = None,
    ) -> None:
        self.dbname = dbname or api_settings.PG_DBNAME
        self.host = host or api_settings.PG_HOST
        self.port = port or api_settings.PG_PORT
        self.user = user or api_settings.PG_USER
        self.password = password or api_settings.PG_PASSWORD
        self._client = client
        self._owns_client = client is None
        self.projection_map = projection_map
        self.logger = Logger(self.__class__.__name__)

    @property
    def client(self) -> Any:
        """Lazily initialize and return the psycopg2 connection.

        Raises:
            MissingConfigError: If no database name is configured
            ConnectionError: If the server cannot be reached
        """
        if self._client is None:
            if not self.dbname:
                raise MissingConfigError(
                    "PG_DBNAME is not set. Pass dbname or set it via environment variable or .env file.",
                    config_key="PG_DBNAME",
                )
            try:
                self._client = psycopg2.connect(
                    dbname=self.dbname,
                    user=self.user,
                    password=self.password,
                    host=self.host,
                    port=self.port,
                )
            except psycopg2.OperationalError as e:
                raise ConnectionError(
                    "Could not connect to PostgreSQL",
                    dbname=self.dbname,
                    host=self.host,
                    port=self.port,
                    original_error=str(e),
                ) from e
            self.logger.message("PostgreSQL connection established (db=%s).", self.dbname)
        return self._client

    def raw_query(self, sql: str, selection_args: Optional[Sequence[Any]] = None) -> RowSet:
        statement = translate_placeholders(sql)
        cur = self.client.cursor()
        try:
            cur.execute(statement, list(selection_args or []))
            columns = [d[0] for d in cur.description or []]
            rows = cur.fetchall() if cur.description else []
        finally:
            cur.close()
        return RowSet(columns, rows)

    def new_statement_builder(self) -> PostgresStatementBuilder:
        return PostgresStatementBuilder(projection_map=self.projection_map)

    def close(self) -> None:
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    def __enter__(self) -> "PostgresConnection":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
