"""Utility functions for querykit.

Small text helpers shared by the statement builder and the connections.
None of them parse SQL; they only track quoted literals and comments so that
characters inside ``'...'``, ``"..."``, ``-- ...`` or ``/* ... */`` are left
alone.
"""

import re
from typing import Iterator, List, Optional, Sequence, Tuple

_LIMIT_PATTERN = re.compile(r"\s*\d+\s*(,\s*\d+\s*)?")


def iter_unquoted(text: str) -> Iterator[Tuple[int, str, bool]]:
    """Yield ``(index, char, quoted)`` for each character of ``text``.

    ``quoted`` is True inside string literals, quoted identifiers and SQL
    comments (``-- ...`` up to the end of the line, ``/* ... */``). A doubled
    quote inside a literal (``'it''s'``) is an escaped quote and keeps the
    literal open.
    """
    state: Optional[str] = None
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        nxt = text[i + 1] if i + 1 < n else ""
        if state is None:
            if ch in ("'", '"'):
                state = ch
            elif ch == "-" and nxt == "-":
                state = "--"
            elif ch == "/" and nxt == "*":
                state = "/*"
                yield i, ch, True
                i += 1
                ch = nxt
            else:
                yield i, ch, False
                i += 1
                continue
            yield i, ch, True
        elif state == "--":
            yield i, ch, True
            if ch == "\n":
                state = None
        elif state == "/*":
            yield i, ch, True
            if ch == "*" and nxt == "/":
                i += 1
                yield i, nxt, True
                state = None
        else:
            yield i, ch, True
            if ch == state:
                if nxt == state:
                    i += 1
                    yield i, nxt, True
                else:
                    state = None
        i += 1


def has_balanced_parentheses(text: Optional[str]) -> bool:
    """Return True if parentheses outside literals and comments are balanced.

    A closing parenthesis that would drop the depth below zero (as in
    ``a = 1) OR (1 = 1``) counts as unbalanced.
    """
    if not text:
        return True
    depth = 0
    for _, ch, quoted in iter_unquoted(text):
        if quoted:
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


def is_valid_limit(limit: str) -> bool:
    """A LIMIT body is ``N`` or ``N,M`` made of digits."""
    return _LIMIT_PATTERN.fullmatch(limit) is not None


def split_limit(limit: str) -> Tuple[Optional[str], str]:
    """Split a valid LIMIT body into ``(offset, count)``.

    ``"20,10"`` gives ``("20", "10")``; ``"10"`` gives ``(None, "10")``.
    """
    offset, sep, count = limit.partition(",")
    if not sep:
        return None, offset.strip()
    return offset.strip(), count.strip()


def translate_placeholders(sql: str) -> str:
    """Rewrite ``?`` placeholders into pyformat ``%s`` for psycopg2.

    Question marks inside string literals and comments are kept. Every ``%`` is doubled,
    quoted or not, because psycopg2 scans the whole statement for markers.
    """
    out: List[str] = []
    for _, ch, quoted in iter_unquoted(sql):
        if ch == "%":
            out.append("%%")
        elif ch == "?" and not quoted:
            out.append("%s")
        else:
            out.append(ch)
    return "".join(out)


def _bind_text(value: object) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def as_str_list(values: Optional[Sequence[object]]) -> Optional[List[Optional[str]]]:
    """Copy bind values into a list of strings.

    NULL binds (None) are kept and booleans become ``"1"``/``"0"``, the way
    SQLite stores them.

    Raises:
        TypeError: If ``values`` is a single ``str`` or ``bytes`` instead of a
            sequence of values
    """
    if values is None:
        return None
    if isinstance(values, (str, bytes)):
        raise TypeError(f"Bind values must be a sequence, not {type(values).__name__}: {values!r}")
    return [_bind_text(v) for v in values]
