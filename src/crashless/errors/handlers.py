"""FastAPI exception handlers that route framework errors through the envelope."""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from crashless.errors.exceptions import create_error
from crashless.middleware.normalizer import ErrorNormalizer

VALIDATION_STATUS = 422
VALIDATION_CODE = "VALIDATION_ERROR"


def register_error_handlers(app: FastAPI, normalizer: ErrorNormalizer) -> None:
    """Replace FastAPI's default ``{"detail": ...}`` bodies with envelopes.

    Args:
        app: The FastAPI application instance to register handlers on.
        normalizer: Shared with the installation's middleware so logging,
            masking and exporters behave identically.
    """

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        response = await normalizer(request, exc)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        error = create_error(
            "Request validation failed",
            VALIDATION_STATUS,
            VALIDATION_CODE,
            details=jsonable_encoder(exc.errors()),
        )
        return await normalizer(request, error)
