from typing import Optional

import asyncpg
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from user_lookup.db import fetch_users, get_pool
from user_lookup.errors import QueryValidationError, StoreError
from user_lookup.logging import get_logger
from user_lookup.queries import build_info_query, build_search_query
from user_lookup.schemas import ErrorResponse, HealthResponse, InfoQuery, SearchQuery, User

logger = get_logger(__name__)

INFO_FAILURE_MESSAGE = "Something bad happened while fetching user info"
SEARCH_FAILURE_MESSAGE = "Something bad happened while fetching all user items"

router = APIRouter()


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
    )


@router.get("/healthchecker", response_model=HealthResponse)
async def health(request: Request):
    """Health check endpoint."""
    return {"status": "success", "message": request.app.state.settings.service_banner}


@router.get(
    "/info",
    response_model=list[User],
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_info(
    uid: Optional[str] = Query(None),
    upper_date: Optional[str] = Query(None, alias="upperDate"),
    lower_date: Optional[str] = Query(None, alias="lowerDate"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    pool: asyncpg.Pool = Depends(get_pool),
):
    """Look users up by uid and/or birthday range, paginated."""
    params = InfoQuery(
        uid=uid,
        upper_date=upper_date,
        lower_date=lower_date,
        page=page,
        limit=limit,
    )

    try:
        query, args = build_info_query(params)
    except QueryValidationError as exc:
        return error_response(400, str(exc))

    try:
        return await fetch_users(pool, query, args)
    except StoreError:
        logger.exception("info_query_failed", uid=uid, page=page, limit=limit)
        return error_response(500, INFO_FAILURE_MESSAGE)


@router.get(
    "/search",
    response_model=list[User],
    responses={500: {"model": ErrorResponse}},
)
async def search_users(
    name: str = Query(...),
    pool: asyncpg.Pool = Depends(get_pool),
):
    """Case-insensitive substring search on user names."""
    query, args = build_search_query(SearchQuery(name=name))

    try:
        return await fetch_users(pool, query, args)
    except StoreError:
        logger.exception("search_query_failed", name=name)
        return error_response(500, SEARCH_FAILURE_MESSAGE)
