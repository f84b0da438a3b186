"""Exception handlers converting every fault into the JSON envelope."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "Something went wrong"


def error_response(status_code: int, error: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error, **extra})


def describe_validation_error(err: dict) -> str:
    """Human readable message for one pydantic error entry."""
    loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(loc)
    if err.get("type") == "missing" and field:
        return f"{field.capitalize()} is required"
    if err.get("type") == "title_required" or not field:
        return err.get("msg", "Invalid request")
    return f"{field}: {err.get('msg')}"


def install_error_handlers(app: FastAPI, show_details: bool) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        messages = [describe_validation_error(e) for e in errors]
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            messages[0] if messages else "Invalid request",
            details=messages
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Pas d'endpoint résolu: erreur de routage, pas une ressource absente
        unmatched = exc.status_code == status.HTTP_404_NOT_FOUND and "endpoint" not in request.scope
        if unmatched or exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            return error_response(
                status.HTTP_404_NOT_FOUND,
                "Endpoint not found",
                path=request.url.path,
                method=request.method
            )
        response = error_response(exc.status_code, exc.detail)
        if getattr(exc, "headers", None):
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(SQLAlchemyError)
    async def database_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("Database error on %s %s", request.method, request.url.path)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            message=str(exc) if show_details else GENERIC_MESSAGE
        )


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    """Innermost middleware: turns any other exception into the 500 envelope.

    Runs inside CORS, security headers and rate limiting so the 500 carries
    their headers too.
    """

    def __init__(self, app, show_details: bool = False):
        super().__init__(app)
        self.show_details = show_details

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "Internal server error",
                message=str(exc) if self.show_details else GENERIC_MESSAGE
            )
