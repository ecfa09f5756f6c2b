"""Tests for QueryModel configuration, accessors and execution dispatch."""

import pytest

from querykit import QueryKind, QueryModel, ResultCursor, RowSet
from querykit.exceptions import (
    InvalidStateError,
    QueryAlreadyInitializedError,
    UninitializedQueryError,
    UnsupportedQueryKindError,
)


class TestInitialState:
    """Tests for a freshly constructed model."""

    def test_starts_uninitialized(self):
        model = QueryModel()
        assert model.query_kind == QueryKind.UNINITIALIZED
        assert model.is_initialized is False

    def test_clause_accessors_default(self):
        model = QueryModel()
        assert model.raw_sql is None
        assert model.tables is None
        assert model.columns is None
        assert model.selection is None
        assert model.selection_args is None
        assert model.group_by is None
        assert model.having is None
        assert model.sort_order is None
        assert model.limit is None
        assert model.distinct is False
        assert model.strict is False

    def test_metadata_defaults(self):
        model = QueryModel()
        assert model.version == 0
        assert model.tag is None
        assert model.comment is None

    def test_execute_uninitialized_raises(self, recording_connection):
        with pytest.raises(UninitializedQueryError, match="uninitialized"):
            QueryModel().execute(recording_connection)
        assert recording_connection.raw_calls == []
        assert recording_connection.builders == []

    def test_uninitialized_error_is_invalid_state(self, recording_connection):
        with pytest.raises(InvalidStateError):
            QueryModel().execute(recording_connection)


class TestRawConfiguration:
    """Tests for set_raw_query."""

    def test_set_raw_query(self):
        model = QueryModel()
        model.set_raw_query("SELECT * FROM t WHERE a = ?", ["5"])
        assert model.query_kind == QueryKind.RAW
        assert model.raw_sql == "SELECT * FROM t WHERE a = ?"
        assert model.selection_args == ["5"]

    def test_managed_fields_stay_unset(self):
        model = QueryModel()
        model.set_raw_query("SELECT 1")
        assert model.tables is None
        assert model.columns is None
        assert model.distinct is False
        assert model.selection_args is None

    def test_args_are_bound_as_strings(self):
        model = QueryModel.raw("SELECT ?", [5])
        assert model.selection_args == ["5"]

    def test_boolean_args_bound_as_integers(self):
        assert QueryModel.raw("SELECT ?, ?", [True, False]).selection_args == ["1", "0"]

    def test_single_string_args_rejected(self):
        model = QueryModel()
        with pytest.raises(TypeError):
            model.set_raw_query("SELECT ?", "55")
        assert model.query_kind == QueryKind.UNINITIALIZED

    def test_second_raw_call_rejected(self):
        model = QueryModel()
        model.set_raw_query("SELECT 1", [])
        with pytest.raises(QueryAlreadyInitializedError, match="only be set once"):
            model.set_raw_query("SELECT 2", ["x"])
        assert model.raw_sql == "SELECT 1"
        assert model.selection_args == []

    def test_managed_after_raw_rejected(self):
        model = QueryModel()
        model.set_raw_query("SELECT 1", ["a"])
        with pytest.raises(InvalidStateError):
            model.set_query_params("t", ["a"])
        assert model.query_kind == QueryKind.RAW
        assert model.raw_sql == "SELECT 1"
        assert model.selection_args == ["a"]
        assert model.tables is None


class TestManagedConfiguration:
    """Tests for set_query_params."""

    def test_only_tables(self):
        model = QueryModel()
        model.set_query_params("t")
        assert model.query_kind == QueryKind.MANAGED
        assert model.tables == "t"
        assert model.columns is None
        assert model.selection is None
        assert model.limit is None

    def test_all_clauses(self):
        model = QueryModel()
        model.set_query_params(
            "t",
            ["a", "count(*) AS n"],
            "a > ?",
            ["1"],
            "a",
            "n > 1",
            "a DESC",
            "10",
            distinct=True,
            strict=True,
        )
        assert model.tables == "t"
        assert model.columns == ["a", "count(*) AS n"]
        assert model.selection == "a > ?"
        assert model.selection_args == ["1"]
        assert model.group_by == "a"
        assert model.having == "n > 1"
        assert model.sort_order == "a DESC"
        assert model.limit == "10"
        assert model.distinct is True
        assert model.strict is True
        assert model.raw_sql is None

    def test_having_without_group_by_accepted(self):
        model = QueryModel.managed("t", having="count(*) > 1")
        assert model.having == "count(*) > 1"
        assert model.group_by is None

    def test_second_managed_call_rejected(self):
        model = QueryModel.managed("t", ["a"])
        with pytest.raises(QueryAlreadyInitializedError):
            model.set_query_params("u", ["b"])
        assert model.tables == "t"
        assert model.columns == ["a"]

    def test_raw_after_managed_rejected(self):
        model = QueryModel.managed("t")
        with pytest.raises(QueryAlreadyInitializedError):
            model.set_raw_query("SELECT 1")
        assert model.query_kind == QueryKind.MANAGED

    def test_accessors_return_copies(self):
        model = QueryModel.managed("t", ["a"], "a = ?", ["1"])
        model.columns.append("b")
        model.selection_args.append("2")
        assert model.columns == ["a"]
        assert model.selection_args == ["1"]

    def test_caller_list_mutation_does_not_leak(self):
        columns = ["a"]
        model = QueryModel.managed("t", columns)
        columns.append("b")
        assert model.columns == ["a"]


class TestMetadata:
    """Metadata is freely settable before and after configuration."""

    def test_metadata_before_and_after(self):
        model = QueryModel()
        model.tag = "first"
        model.set_raw_query("SELECT 1")
        model.tag = "second"
        model.version = 3
        model.comment = "counts"
        assert model.tag == "second"
        assert model.version == 3
        assert model.comment == "counts"

    def test_constructor_helpers_set_metadata(self):
        model = QueryModel.managed("t", ["a"], version=2, tag="x", comment="c")
        assert (model.version, model.tag, model.comment) == (2, "x", "c")
        raw = QueryModel.raw("SELECT 1", tag="r")
        assert raw.tag == "r"
        assert raw.version == 0


class TestExecuteDispatch:
    """Tests for execute() against a recording connection."""

    def test_managed_calls_builder(self, recording_connection):
        model = QueryModel.managed("t", ["a", "b"], "a = ?", ["5"], None, None, "a", "3", distinct=True, strict=True)
        cursor = model.execute(recording_connection)

        builder = recording_connection.builders[0]
        assert builder.calls == [
            ("set_tables", "t"),
            ("set_distinct", True),
            ("set_strict", True),
            ("query", ["a", "b"], "a = ?", ["5"], None, None, "a", "3"),
        ]
        assert recording_connection.raw_calls == []
        assert isinstance(cursor, ResultCursor)

    def test_strict_skipped_without_capability(self, make_recording_connection):
        conn = make_recording_connection(supports_strict_mode=False)
        QueryModel.managed("t", strict=True).execute(conn)
        names = [c[0] for c in conn.builders[0].calls]
        assert "set_strict" not in names
        assert names == ["set_tables", "set_distinct", "query"]

    def test_raw_runs_verbatim(self, recording_connection):
        model = QueryModel.raw("SELECT * FROM t WHERE a = ? AND b = ?", ["1", "x"])
        model.execute(recording_connection)
        assert recording_connection.raw_calls == [("SELECT * FROM t WHERE a = ? AND b = ?", ["1", "x"])]
        assert recording_connection.builders == []

    def test_cursor_positioned_on_first_row(self, recording_connection):
        cursor = QueryModel.raw("SELECT x").execute(recording_connection)
        assert cursor.position == 0
        assert cursor.get_int("x") == 1

    def test_cursor_references_model(self, recording_connection):
        model = QueryModel.raw("SELECT x")
        cursor = model.execute(recording_connection)
        assert cursor.model is model

    def test_execute_repeatedly(self, make_recording_connection):
        model = QueryModel.raw("SELECT x")
        first = model.execute(make_recording_connection())
        second = model.execute(make_recording_connection())
        assert first.count == second.count == 2
        assert model.query_kind == QueryKind.RAW

    def test_empty_result_cursor(self, make_recording_connection):
        conn = make_recording_connection(rows=RowSet(["x"], []))
        cursor = QueryModel.raw("SELECT x").execute(conn)
        assert cursor.count == 0
        assert cursor.is_after_last()

    def test_unknown_kind_raises(self, recording_connection):
        model = QueryModel()
        model._kind = 9
        with pytest.raises(UnsupportedQueryKindError):
            model.execute(recording_connection)

    def test_collaborator_errors_propagate_unchanged(self, make_recording_connection):
        class Boom(Exception):
            pass

        conn = make_recording_connection()

        def fail(sql, args=None):
            raise Boom("driver failure")

        conn.raw_query = fail
        with pytest.raises(Boom, match="driver failure"):
            QueryModel.raw("SELECT 1").execute(conn)


class TestEquality:
    """Tests for field-for-field equality."""

    def test_equal_models(self):
        assert QueryModel.managed("t", ["a"], tag="x") == QueryModel.managed("t", ["a"], tag="x")

    def test_kind_matters(self):
        assert QueryModel() != QueryModel.raw("SELECT 1")

    def test_metadata_matters(self):
        assert QueryModel.raw("SELECT 1", tag="a") != QueryModel.raw("SELECT 1", tag="b")

    def test_clauses_matter(self):
        assert QueryModel.managed("t", ["a"]) != QueryModel.managed("t", ["b"])

    def test_not_equal_to_other_types(self):
        assert QueryModel() != "QueryModel"

    def test_repr_mentions_kind(self):
        assert "RAW" in repr(QueryModel.raw("SELECT 1"))
