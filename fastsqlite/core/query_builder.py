"""
SQL statement builders for dictionary-shaped CRUD calls.

Every builder returns a ``Statement``: SQL text plus a mapping of named
parameters. Values are always bound as parameters. Table names, column names
and raw condition fragments are interpolated verbatim, so callers must only
pass trusted identifiers and fragments.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Tuple, Union

from fastsqlite.utils.datetime_helpers import to_db_text

FieldMap = Mapping[str, Any]
Columns = Union[str, Iterable[str]]

PARAM_PREFIX = "param_"
LOGICAL_OPERATORS = ("AND", "OR")

_NON_WORD = re.compile(r"\W")


@dataclass(frozen=True)
class Statement:
    """SQL text with its bound parameters."""

    sql: str
    params: Dict[str, Any] = field(default_factory=dict)


def bind_value(value: Any) -> Any:
    """
    Convert a Python value to something the sqlite3 driver binds natively.

    Decimals are stored as text to keep their precision; dates and datetimes
    as ISO8601 text; booleans as 0/1. Other values pass through untouched and
    the driver rejects what it can't bind.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, date):
        return to_db_text(value)
    return value


def param_name(column: str, taken: Iterable[str] = ()) -> str:
    """
    Derive the named-parameter key for a column.

    Non-word characters become "_"; a numeric suffix keeps the name unique
    among ``taken``.
    """
    base = PARAM_PREFIX + _NON_WORD.sub("_", column.strip())
    taken = set(taken)
    name = base
    suffix = 2
    while name in taken:
        name = f"{base}_{suffix}"
        suffix += 1
    return name


def _bind_fields(data: FieldMap) -> Tuple[List[Tuple[str, str]], Dict[str, Any]]:
    if not isinstance(data, Mapping):
        raise TypeError(f"Expected a mapping of column names to values, got {type(data).__name__}")
    pairs: List[Tuple[str, str]] = []
    params: Dict[str, Any] = {}
    for column, value in data.items():
        name = param_name(column, params)
        params[name] = bind_value(value)
        pairs.append((column, name))
    return pairs, params


def join_columns(columns: Columns) -> str:
    """Render a column list; strings are used as given, iterables joined with ", "."""
    if isinstance(columns, str):
        rendered = columns.strip()
    else:
        rendered = ", ".join(columns)
    if not rendered:
        raise ValueError("At least one column is required")
    return rendered


def where_clause(condition: str = "") -> str:
    """'WHERE 1=1' with the optional raw condition appended."""
    if condition and condition.strip():
        return f"WHERE 1=1 AND {condition.strip()}"
    return "WHERE 1=1"


def build_select(table: str, columns: Columns = "*", condition: str = "") -> Statement:
    return Statement(f"SELECT {join_columns(columns)} FROM {table} {where_clause(condition)}")


def build_insert(table: str, data: FieldMap) -> Statement:
    """INSERT for one row; an empty mapping inserts a row of defaults."""
    pairs, params = _bind_fields(data)
    if not pairs:
        return Statement(f"INSERT INTO {table} DEFAULT VALUES")

    columns = ", ".join(column for column, _ in pairs)
    placeholders = ", ".join(f":{name}" for _, name in pairs)
    return Statement(f"INSERT INTO {table} ({columns}) VALUES ({placeholders})", params)


def build_update(table: str, data: FieldMap, condition: str = "") -> Statement:
    pairs, params = _bind_fields(data)
    if not pairs:
        raise ValueError("Nothing to update: no columns given")

    assignments = ", ".join(f"{column} = :{name}" for column, name in pairs)
    return Statement(f"UPDATE {table} SET {assignments} {where_clause(condition)}", params)


def build_delete(table: str, condition: str) -> Statement:
    """
    DELETE with a raw condition.

    The condition is mandatory: a blank one would match every row, so it is
    refused instead.
    """
    if not condition or not condition.strip():
        raise ValueError("Refusing to delete without a condition")
    return Statement(f"DELETE FROM {table} {where_clause(condition)}")


def build_delete_where(
    table: str, conditions: FieldMap, logical_operator: str = "AND"
) -> Statement:
    """
    DELETE matching ``column = value`` pairs joined by AND/OR.

    Only one condition per column is possible since the mapping keys are
    the column names.
    """
    operator = logical_operator.strip().upper()
    if operator not in LOGICAL_OPERATORS:
        raise ValueError(f"Logical operator must be AND or OR, got '{logical_operator}'")

    pairs, params = _bind_fields(conditions)
    if not pairs:
        raise ValueError("Refusing to delete without a condition")

    clause = f" {operator} ".join(f"{column} = :{name}" for column, name in pairs)
    return Statement(f"DELETE FROM {table} WHERE {clause}", params)
