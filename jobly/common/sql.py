"""
SQL Fragment Builders for Partial Updates

This module turns a sparse, caller-supplied set of fields-to-update into a
parameterized assignment fragment that can be dropped into an UPDATE
statement:

    >>> frag = sql_for_partial_update(
    ...     {"firstName": "Aliya", "age": 32},
    ...     NameMap({"firstName": "first_name"}),
    ... )
    >>> frag.clause
    '"first_name"=$1, "age"=$2'
    >>> frag.values
    ('Aliya', 32)

Key Concepts:
- Positional placeholders: `$k` always binds `values[k - 1]`
- Name mapping: callers use camelCase field ids, the schema uses snake_case
  columns; unmapped ids pass through unchanged
- Trust boundary: mapped column names are developer configuration
  (`ColumnName`), never request data
- Pure: no I/O, no shared state, safe to call from any thread
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Union

from .errors import EmptyInputError

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

UpdatePayload = Union[Mapping[str, Any], Iterable[tuple[str, Any]]]


class ColumnName(str):
    """A storage column identifier that is safe to place unquoted in SQL."""

    def __new__(cls, value: str) -> "ColumnName":
        if not isinstance(value, str) or not _IDENTIFIER_RE.match(value):
            raise ValueError(f"Invalid column identifier: {value!r}")
        return super().__new__(cls, value)


class NameMap(Mapping[str, ColumnName]):
    """
    Immutable, ordered table from caller field ids to storage columns.

    Built once from a fixed allowlist at import time. Every value is validated
    as a `ColumnName` on construction, so a malformed entry fails at startup
    rather than at query time.

    Example:
        >>> COMPANY_COLUMNS = NameMap({"numEmployees": "num_employees"})
        >>> COMPANY_COLUMNS["numEmployees"]
        'num_employees'
    """

    def __init__(self, mapping: Mapping[str, str] | None = None):
        self._columns: dict[str, ColumnName] = {
            field_id: ColumnName(column) for field_id, column in (mapping or {}).items()
        }

    def __getitem__(self, field_id: str) -> ColumnName:
        return self._columns[field_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._columns)

    def __len__(self) -> int:
        return len(self._columns)

    def __repr__(self) -> str:
        return f"NameMap({self._columns!r})"


@dataclass(frozen=True)
class QueryFragment:
    """
    A clause with positional placeholders and its bound values.

    Attributes:
        clause: SQL text containing `$1..$n` (may be empty)
        values: Bound values; `values[k - 1]` belongs to `$k`
        next_index: First placeholder number not used by this fragment
    """

    clause: str
    values: tuple[Any, ...] = ()
    next_index: int = 1

    @property
    def is_empty(self) -> bool:
        return not self.clause


class FragmentBuilder:
    """
    Accumulates (clause part, bound values) pairs and flattens them.

    Placeholders are handed out by `bind()` in strictly increasing order and
    belong to the part closed by the next `add()` call, so the flattened
    values always line up with the placeholders in the joined clause.

    Example:
        >>> builder = FragmentBuilder(" AND ")
        >>> builder.add(f"salary >= {builder.bind(20000)}")
        >>> builder.add("equity > 0")
        >>> builder.build().clause
        'salary >= $1 AND equity > 0'
    """

    def __init__(self, separator: str, start_index: int = 1):
        self._separator = separator
        self._next_index = start_index
        self._parts: list[tuple[str, tuple[Any, ...]]] = []
        self._pending: list[Any] = []

    def bind(self, value: Any) -> str:
        """Record a value for the current part and return its placeholder."""
        placeholder = f"${self._next_index}"
        self._next_index += 1
        self._pending.append(value)
        return placeholder

    def add(self, part: str) -> None:
        """Close the current part, taking ownership of values bound so far."""
        self._parts.append((part, tuple(self._pending)))
        self._pending = []

    def __len__(self) -> int:
        return len(self._parts)

    def build(self) -> QueryFragment:
        if self._pending:
            raise ValueError("Values were bound without a clause part to hold them")

        clause = self._separator.join(part for part, _ in self._parts)
        values = tuple(value for _, bound in self._parts for value in bound)
        return QueryFragment(clause=clause, values=values, next_index=self._next_index)


def resolve_column(field_id: str, name_map: Mapping[str, str]) -> str:
    """
    Translate a caller field id to its storage column.

    Total: unmapped ids are returned unchanged (e.g. `age` stays `age`).
    """
    return name_map.get(field_id, field_id)


def quote_identifier(name: str) -> str:
    """Quote a column as a SQL identifier, doubling embedded quotes."""
    return '"' + name.replace('"', '""') + '"'


def sql_for_partial_update(
    payload: UpdatePayload,
    name_map: Mapping[str, str],
) -> QueryFragment:
    """
    Build the SET assignments for a partial update.

    Keys are processed in insertion order; key `i` (1-based) becomes
    `"<column>"=$i` and its value lands at `values[i - 1]`. Values are passed
    through as given, including None, which binds SQL NULL. Pairs supplied as
    a sequence are neither reordered nor deduplicated.

    Args:
        payload: Field id → new value, as a mapping or a sequence of pairs
        name_map: Field id → column overrides (see `NameMap`)

    Returns:
        QueryFragment whose `next_index` is the placeholder number to use for
        the row key in the WHERE clause

    Raises:
        EmptyInputError: If the payload has no fields

    Example:
        >>> frag = sql_for_partial_update({"title": "New", "salary": None}, NameMap())
        >>> sql = f"UPDATE jobs SET {frag.clause} WHERE id = ${frag.next_index}"
        >>> sql
        'UPDATE jobs SET "title"=$1, "salary"=$2 WHERE id = $3'
    """
    items = list(payload.items()) if isinstance(payload, Mapping) else list(payload)
    if not items:
        raise EmptyInputError("No data")

    builder = FragmentBuilder(", ")
    for field_id, value in items:
        column = quote_identifier(resolve_column(field_id, name_map))
        builder.add(f"{column}={builder.bind(value)}")

    return builder.build()


__all__ = [
    "ColumnName",
    "NameMap",
    "QueryFragment",
    "FragmentBuilder",
    "UpdatePayload",
    "resolve_column",
    "quote_identifier",
    "sql_for_partial_update",
]
