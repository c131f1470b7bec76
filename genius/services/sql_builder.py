"""
Parameterized SQL construction for the generic table gateway.

Table and column names pass through quote_identifier; values never appear in
the SQL text and are returned as positional parameters ($1, $2, ...).
Functions here are pure: no database access.
"""

import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field

# Unquoted PostgreSQL identifier shape; NAMEDATALEN - 1 bytes max.
IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
MAX_IDENTIFIER_LENGTH = 63

SELECT_ROW_LIMIT = 100

_PLACEHOLDER = re.compile(r"\$(\d+)")

LIST_TABLES_SQL = (
    "SELECT table_name FROM information_schema.tables "
    "WHERE table_schema = 'public' ORDER BY table_name"
)
DESCRIBE_TABLE_SQL = (
    "SELECT column_name, data_type, is_nullable, column_default "
    "FROM information_schema.columns "
    "WHERE table_schema = 'public' AND table_name = $1 "
    "ORDER BY ordinal_position"
)


class InvalidIdentifierError(ValueError):
    """Raised when a table or column name is not a plain identifier."""

    def __init__(self, name: object) -> None:
        self.name = name
        super().__init__(f"Invalid identifier: {name}")


class BuiltQuery(BaseModel):
    """SQL text with $n placeholders and the values bound to them, in order."""

    model_config = {"frozen": True}

    sql: str
    params: list[Any] = Field(default_factory=list)

    def to_named(self) -> tuple[str, dict[str, Any]]:
        """Rewrite $n placeholders as :pn binds for sqlalchemy.text()."""
        sql = _PLACEHOLDER.sub(lambda m: f":p{m.group(1)}", self.sql)
        return sql, {f"p{i}": value for i, value in enumerate(self.params, start=1)}


def quote_identifier(name: object) -> str:
    """Validate a table/column name and return it double-quoted."""
    if not isinstance(name, str) or len(name) > MAX_IDENTIFIER_LENGTH:
        raise InvalidIdentifierError(name)
    if not IDENTIFIER_PATTERN.fullmatch(name):
        raise InvalidIdentifierError(name)
    return f'"{name}"'


def _equalities(columns: list[str], start: int) -> list[str]:
    return [
        f"{quote_identifier(column)} = ${index}"
        for index, column in enumerate(columns, start=start)
    ]


def build_select(table: str, filters: Mapping[str, Any] | None = None) -> BuiltQuery:
    """SELECT * with optional AND-joined equality filters, capped at SELECT_ROW_LIMIT rows."""
    sql = f"SELECT * FROM {quote_identifier(table)}"
    params: list[Any] = []
    if filters:
        sql += " WHERE " + " AND ".join(_equalities(list(filters), 1))
        params.extend(filters.values())
    sql += f" LIMIT {SELECT_ROW_LIMIT}"
    return BuiltQuery(sql=sql, params=params)


def build_insert(table: str, data: Mapping[str, Any]) -> BuiltQuery:
    if not data:
        raise ValueError("insert needs at least one column")
    columns = ", ".join(quote_identifier(column) for column in data)
    placeholders = ", ".join(f"${i}" for i in range(1, len(data) + 1))
    return BuiltQuery(
        sql=f"INSERT INTO {quote_identifier(table)} ({columns}) VALUES ({placeholders}) RETURNING *",
        params=list(data.values()),
    )


def build_update(
    table: str,
    data: Mapping[str, Any],
    filters: Mapping[str, Any],
) -> BuiltQuery:
    """Data parameters are numbered first, filter parameters after them."""
    if not data or not filters:
        raise ValueError("update needs at least one column and one filter")
    set_clause = ", ".join(_equalities(list(data), 1))
    where_clause = " AND ".join(_equalities(list(filters), len(data) + 1))
    return BuiltQuery(
        sql=f"UPDATE {quote_identifier(table)} SET {set_clause} WHERE {where_clause} RETURNING *",
        params=[*data.values(), *filters.values()],
    )


def build_delete(table: str, filters: Mapping[str, Any]) -> BuiltQuery:
    if not filters:
        raise ValueError("delete needs at least one filter")
    where_clause = " AND ".join(_equalities(list(filters), 1))
    return BuiltQuery(
        sql=f"DELETE FROM {quote_identifier(table)} WHERE {where_clause} RETURNING *",
        params=list(filters.values()),
    )


def build_list_tables() -> BuiltQuery:
    return BuiltQuery(sql=LIST_TABLES_SQL)


def build_describe_table(table: str) -> BuiltQuery:
    """The table name is compared as a value here, so it is bound rather than quoted."""
    return BuiltQuery(sql=DESCRIBE_TABLE_SQL, params=[table])


def is_select_statement(query: str) -> bool:
    """True when the text, trimmed, starts with SELECT (any case)."""
    return query.strip().upper().startswith("SELECT")


def is_single_statement(query: str) -> bool:
    """True when no statement separator appears before the (optional) trailing semicolons."""
    return ";" not in query.strip().rstrip(";")
