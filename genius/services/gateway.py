"""Generic table gateway: dispatch an action descriptor to a parameterized statement and run it."""

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy import text
from sqlalchemy.orm import Session

from genius.schemas.db import DbRequest
from genius.services.sql_builder import (
    BuiltQuery,
    InvalidIdentifierError,
    build_delete,
    build_describe_table,
    build_insert,
    build_list_tables,
    build_select,
    build_update,
    is_select_statement,
    is_single_statement,
)

logger = logging.getLogger(__name__)

Rows = list[dict[str, Any]]


class GatewayError(Exception):
    """Raised for requests rejected before reaching the database (missing fields, bad identifiers, non-SELECT)."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def _rows(result: Any) -> Rows:
    if not result.returns_rows:
        return []
    return [dict(row) for row in result.mappings().all()]


def execute_built(db: Session, built: BuiltQuery) -> Rows:
    """Run a BuiltQuery with its values bound as parameters."""
    sql, params = built.to_named()
    return _rows(db.execute(text(sql), params))


def _query(db: Session, request: DbRequest) -> Rows:
    if not request.query:
        raise GatewayError("Query is required")
    if not is_select_statement(request.query):
        logger.info("Rejected non-SELECT raw query")
        raise GatewayError("Only SELECT queries are allowed")
    if not is_single_statement(request.query):
        logger.info("Rejected multi-statement raw query")
        raise GatewayError("Only a single SELECT statement is allowed")
    # Verbatim text: no bind parsing, no driver-side parameter substitution.
    result = db.connection().exec_driver_sql(
        request.query,
        execution_options={"no_parameters": True},
    )
    return _rows(result)


def _list_tables(db: Session, request: DbRequest) -> Rows:
    return execute_built(db, build_list_tables())


def _describe_table(db: Session, request: DbRequest) -> Rows:
    if not request.table:
        raise GatewayError("Table name is required")
    return execute_built(db, build_describe_table(request.table))


def _select(db: Session, request: DbRequest) -> Rows:
    if not request.table:
        raise GatewayError("Table name is required")
    return execute_built(db, build_select(request.table, request.filters))


def _insert(db: Session, request: DbRequest) -> Rows:
    if not request.table or not request.data:
        raise GatewayError("Table and data are required")
    return execute_built(db, build_insert(request.table, request.data))


def _update(db: Session, request: DbRequest) -> Rows:
    if not request.table or not request.data or not request.filters:
        raise GatewayError("Table, data, and filters are required")
    return execute_built(db, build_update(request.table, request.data, request.filters))


def _delete(db: Session, request: DbRequest) -> Rows:
    if not request.table or not request.filters:
        raise GatewayError("Table and filters are required")
    return execute_built(db, build_delete(request.table, request.filters))


ACTION_HANDLERS: dict[str, Callable[[Session, DbRequest], Rows]] = {
    "query": _query,
    "list_tables": _list_tables,
    "describe_table": _describe_table,
    "select": _select,
    "insert": _insert,
    "update": _update,
    "delete": _delete,
}


def run_action(db: Session, request: DbRequest) -> Rows:
    """
    Validate and execute one gateway action; commit and return the resulting rows.

    Raises GatewayError for unknown actions, missing fields, invalid identifiers,
    and rejected raw queries (nothing is executed in those cases). Database
    errors propagate after the transaction is rolled back.
    """
    handler = ACTION_HANDLERS.get(request.action or "")
    if handler is None:
        raise GatewayError(f"Unknown action: {request.action}")
    try:
        rows = handler(db, request)
        db.commit()
    except InvalidIdentifierError as e:
        db.rollback()
        raise GatewayError(str(e)) from e
    except Exception:
        db.rollback()
        raise
    logger.info(
        "Gateway action completed",
        extra={"action": request.action, "table": request.table, "row_count": len(rows)},
    )
    return rows
