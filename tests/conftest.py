"""Pytest configuration and fixtures for querykit tests."""

import sqlite3
from typing import Any, List, Optional, Sequence

import pytest
from dotenv import load_dotenv

from querykit.abc import Connection, StatementBuilder
from querykit.cursor import RowSet
from querykit.dbs.sqlite import SQLiteConnection

# Load environment variables
load_dotenv()


@pytest.fixture
def sqlite_db():
    """In-memory database with a small ``t`` table and ``users``/``orders`` pair."""
    conn = sqlite3.connect(":memory:")
    conn.executescript(
        """
        CREATE TABLE t (a INTEGER, b TEXT);
        INSERT INTO t (a, b) VALUES (5, 'five'), (6, 'six'), (5, 'cinq'), (7, NULL);

        CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT, active INTEGER, score REAL, avatar BLOB);
        INSERT INTO users VALUES (1, 'ada', 1, 9.5, X'0102'), (2, 'bob', 0, 4.0, NULL), (3, 'cy', 1, 7.25, NULL);

        CREATE TABLE orders (id INTEGER PRIMARY KEY, user_id INTEGER, total INTEGER);
        INSERT INTO orders VALUES (1, 1, 10), (2, 1, 30), (3, 3, 5), (4, 2, 50);
        """
    )
    yield conn
    conn.close()


@pytest.fixture
def connection(sqlite_db):
    """SQLiteConnection over the seeded database, strict mode supported."""
    return SQLiteConnection(client=sqlite_db, supports_strict_mode=True)


class RecordingBuilder(StatementBuilder):
    """Statement builder that records every call and returns canned rows."""

    def __init__(self, rows: RowSet) -> None:
        self.calls: List[tuple] = []
        self._rows = rows

    def set_tables(self, tables: Optional[str]) -> None:
        self.calls.append(("set_tables", tables))

    def set_distinct(self, distinct: bool) -> None:
        self.calls.append(("set_distinct", distinct))

    def set_strict(self, strict: bool) -> None:
        self.calls.append(("set_strict", strict))

    def query(self, connection, columns, selection, selection_args, group_by, having, sort_order, limit) -> RowSet:
        self.calls.append(("query", columns, selection, selection_args, group_by, having, sort_order, limit))
        return self._rows


class RecordingConnection(Connection):
    """Connection double recording raw queries and handing out a RecordingBuilder."""

    def __init__(self, supports_strict_mode: bool = True, rows: Optional[RowSet] = None) -> None:
        self.supports_strict_mode = supports_strict_mode
        self.rows = rows if rows is not None else RowSet(["x"], [(1,), (2,)])
        self.raw_calls: List[tuple] = []
        self.builders: List[RecordingBuilder] = []

    def raw_query(self, sql: str, selection_args: Optional[Sequence[Any]] = None) -> RowSet:
        self.raw_calls.append((sql, selection_args))
        return self.rows

    def new_statement_builder(self) -> RecordingBuilder:
        builder = RecordingBuilder(self.rows)
        self.builders.append(builder)
        return builder


@pytest.fixture
def recording_connection():
    return RecordingConnection()


@pytest.fixture
def make_recording_connection():
    """Factory for RecordingConnection with custom capability flag or rows."""
    return RecordingConnection
