"""Result rows returned by executing a query model.

``RowSet`` is the positioned row source produced by connections. ``ResultCursor``
wraps it together with the model that produced it and adds lookups by column
name with typed conversions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional, Sequence, Tuple

from .exceptions import ColumnNotFoundError, CursorPositionError

if TYPE_CHECKING:
    from .model import QueryModel

__all__ = ("RowSet", "ResultCursor")


class RowSet:
    """Materialized result rows with a movable position.

    The position starts before the first row (``-1``), like a freshly
    executed database cursor.
    """

    def __init__(self, columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> None:
        self.columns: List[str] = list(columns)
        self.rows: List[Tuple[Any, ...]] = [tuple(r) for r in rows]
        self.position = -1

    @property
    def count(self) -> int:
        return len(self.rows)

    def move_to_position(self, position: int) -> bool:
        """Move to ``position``; returns True if it lands on a row.

        Positions outside the result are clamped to before-first / after-last.
        """
        if position < 0:
            self.position = -1
            return False
        if position >= self.count:
            self.position = self.count
            return False
        self.position = position
        return True

    def move_to_first(self) -> bool:
        return self.move_to_position(0)

    def move_to_next(self) -> bool:
        return self.move_to_position(self.position + 1)

    def is_before_first(self) -> bool:
        return self.count == 0 or self.position < 0

    def is_after_last(self) -> bool:
        return self.count == 0 or self.position >= self.count

    def current(self) -> Tuple[Any, ...]:
        if self.position < 0 or self.position >= self.count:
            raise CursorPositionError("Cursor is not positioned on a row", position=self.position, count=self.count)
        return self.rows[self.position]

    def __len__(self) -> int:
        return self.count

    def __repr__(self) -> str:
        return f"<RowSet columns={self.columns} count={self.count} position={self.position}>"


class ResultCursor:
    """Cursor over the rows of an executed query model.

    Attributes:
        rows: Underlying row set (already moved to its first row by the model)
        model: The query model that produced this cursor
    """

    def __init__(self, rows: RowSet, model: "QueryModel") -> None:
        self.rows = rows
        self.model = model
        self._index: Dict[str, int] = {}
        for i, name in enumerate(rows.columns):
            self._index.setdefault(name.lower(), i)

    # ------------------------------------------------------------------
    # Position
    # ------------------------------------------------------------------
    @property
    def count(self) -> int:
        return self.rows.count

    @property
    def position(self) -> int:
        return self.rows.position

    @property
    def column_names(self) -> List[str]:
        return list(self.rows.columns)

    def move_to_first(self) -> bool:
        return self.rows.move_to_first()

    def move_to_next(self) -> bool:
        return self.rows.move_to_next()

    def move_to_position(self, position: int) -> bool:
        return self.rows.move_to_position(position)

    def is_after_last(self) -> bool:
        return self.rows.is_after_last()

    # ------------------------------------------------------------------
    # Column lookup
    # ------------------------------------------------------------------
    def has_column(self, name: str) -> bool:
        return name.lower() in self._index

    def column_index(self, name: str) -> int:
        """Return the index of ``name`` (case-insensitive, first match wins).

        Raises:
            ColumnNotFoundError: If the result has no such column
        """
        try:
            return self._index[name.lower()]
        except KeyError:
            raise ColumnNotFoundError("Column not found", column=name, available=self.rows.columns) from None

    def _value(self, name: str) -> Any:
        return self.rows.current()[self.column_index(name)]

    # ------------------------------------------------------------------
    # Typed getters
    # ------------------------------------------------------------------
    def get(self, name: str) -> Any:
        return self._value(name)

    def is_null(self, name: str) -> bool:
        return self._value(name) is None

    def get_string(self, name: str) -> Optional[str]:
        value = self._value(name)
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (bytes, bytearray)):
            return bytes(value).decode("utf-8")
        return str(value)

    def get_int(self, name: str) -> int:
        value = self._value(name)
        if value is None:
            return 0
        return int(value)

    def get_float(self, name: str) -> float:
        value = self._value(name)
        if value is None:
            return 0.0
        return float(value)

    def get_bool(self, name: str) -> bool:
        # Booleans are stored as integers; any non-zero value is True.
        return self.get_int(name) != 0

    def get_blob(self, name: str) -> Optional[bytes]:
        value = self._value(name)
        if value is None or isinstance(value, bytes):
            return value
        if isinstance(value, (bytearray, memoryview)):
            return bytes(value)
        return str(value).encode("utf-8")

    # ------------------------------------------------------------------
    # Optional getters: fall back when the column is missing or NULL
    # ------------------------------------------------------------------
    def _opt(self, name: str, getter, fallback: Any) -> Any:
        if not self.has_column(name) or self.is_null(name):
            return fallback
        return getter(name)

    def opt_string(self, name: str, fallback: Optional[str] = None) -> Optional[str]:
        return self._opt(name, self.get_string, fallback)

    def opt_int(self, name: str, fallback: int = 0) -> int:
        return self._opt(name, self.get_int, fallback)

    def opt_float(self, name: str, fallback: float = 0.0) -> float:
        return self._opt(name, self.get_float, fallback)

    def opt_bool(self, name: str, fallback: bool = False) -> bool:
        return self._opt(name, self.get_bool, fallback)

    def opt_blob(self, name: str, fallback: Optional[bytes] = None) -> Optional[bytes]:
        return self._opt(name, self.get_blob, fallback)

    # ------------------------------------------------------------------
    # Bulk access
    # ------------------------------------------------------------------
    def as_dict(self) -> Dict[str, Any]:
        """Return the current row keyed by column name."""
        return dict(zip(self.rows.columns, self.rows.current()))

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        """Iterate every row as a dict, starting from the first row.

        Leaves the cursor after the last row.
        """
        ok = self.move_to_first()
        while ok:
            yield self.as_dict()
            ok = self.move_to_next()

    def __len__(self) -> int:
        return self.count

    def __repr__(self) -> str:
        return f"<ResultCursor kind={self.model.query_kind.name} count={self.count} position={self.position}>"
