"""Request/response schemas for the generic table gateway."""

from typing import Any, Literal, get_args

from pydantic import BaseModel, Field

# Actions accepted by POST /api/db.
DbAction = Literal[
    "query",
    "list_tables",
    "describe_table",
    "select",
    "insert",
    "update",
    "delete",
]

DB_ACTIONS: frozenset[str] = frozenset(get_args(DbAction))


class DbRequest(BaseModel):
    """Action descriptor. Table and column names are identifiers; every value is bound as a parameter."""

    model_config = {"extra": "ignore"}

    action: str | None = Field(default=None, description="One of the gateway actions")
    query: str | None = Field(default=None, description="Raw SELECT statement (query)")
    table: str | None = Field(default=None, description="Target table name")
    data: dict[str, Any] | None = Field(
        default=None,
        description="Column -> value mapping (insert, update)",
    )
    filters: dict[str, Any] | None = Field(
        default=None,
        description="Column -> value equality filters joined with AND (select, update, delete)",
    )


class DbResponse(BaseModel):
    """Rows produced by the action."""

    model_config = {"populate_by_name": True}

    success: bool = True
    data: list[dict[str, Any]] = Field(default_factory=list)
    row_count: int = Field(default=0, alias="rowCount")
