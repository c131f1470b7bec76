"""Generic table gateway endpoint."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from genius.api.deps import require_db_access
from genius.core.database import get_db
from genius.models.user import User
from genius.schemas.db import DbRequest, DbResponse
from genius.services.gateway import GatewayError, run_action

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=DbResponse)
def post_db(
    body: DbRequest,
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[User | None, Depends(require_db_access)],
) -> DbResponse:
    """
    Run one table action (query, list_tables, describe_table, select, insert,
    update, delete). Values are always bound parameters; only SELECT text is
    accepted for raw queries.

    Requires Authorization: Bearer <token> unless DB_API_REQUIRE_AUTH is
    disabled; missing or invalid tokens get 401 before any SQL runs.
    """
    try:
        rows = run_action(db, body)
    except GatewayError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e
    except Exception as e:
        logger.exception("DB error: action=%s table=%s", body.action, body.table)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e) or "Database error",
        ) from e
    return DbResponse(data=rows, row_count=len(rows))
