"""
Map domain errors to HTTP responses.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from todo_api.core.errors import AuthError, TodoApiError
from todo_api.storage import StorageError

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error taxonomy handlers to ``app``."""

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        # Bad body shape is a 400 like any other validation failure.
        # The rejected input is not echoed back; it may not be encodable.
        detail = [
            {"loc": err["loc"], "msg": err["msg"], "type": err["type"]}
            for err in exc.errors()
        ]
        return JSONResponse(status_code=400, content={"detail": jsonable_encoder(detail)})

    @app.exception_handler(AuthError)
    async def auth_error(request: Request, exc: AuthError):
        # Empty body for every auth failure
        return Response(status_code=401)

    @app.exception_handler(TodoApiError)
    async def todo_api_error(request: Request, exc: TodoApiError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(StorageError)
    async def storage_error(request: Request, exc: StorageError):
        logger.exception("Storage failure on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"detail": "Storage error"})
