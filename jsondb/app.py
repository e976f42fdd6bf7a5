from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from dotenv import load_dotenv

from .async_database import AsyncJsonDatabase
from .database import JsonDatabase
from .errors import (
    ArrayNotFound,
    DatabaseError,
    DatabaseFileNotFound,
    DivisionByZero,
    InvalidDocument,
    InvalidValue,
    KeyNotFound,
    ObjectNotFound,
)
from .settings import get_settings

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: dict[type[DatabaseError], int] = {
    KeyNotFound: 404,
    ObjectNotFound: 404,
    ArrayNotFound: 404,
    InvalidValue: 400,
    DivisionByZero: 400,
    InvalidDocument: 500,
    DatabaseFileNotFound: 500,
}


def status_for(exc: DatabaseError) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[cls]
    return 500


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    status = status_for(exc)
    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse({"error": type(exc).__name__, "detail": str(exc)}, status_code=status)


# Serve with: uvicorn --factory jsondb.app:create_app
def create_app(database: JsonDatabase | AsyncJsonDatabase | None = None) -> FastAPI:
    load_dotenv("local.env")

    from .endpoints.keys import router as keys_router

    if database is None:
        database = JsonDatabase(settings=get_settings())
    # Routes await writes through the async facade so disk I/O stays off the loop.
    if isinstance(database, JsonDatabase):
        database = AsyncJsonDatabase(database)

    app = FastAPI()
    app.state.database = database
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.include_router(keys_router)

    return app
