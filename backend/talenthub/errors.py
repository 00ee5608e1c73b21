"""Domain errors and their mapping onto HTTP responses.

Services raise these; the handlers registered by ``setup_error_handlers``
turn them into ``{"error": message, ...}`` JSON bodies.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class TalentHubError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {"error": self.message, **self.details}


class ValidationError(TalentHubError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(TalentHubError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(TalentHubError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(TalentHubError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(TalentHubError):
    status_code = status.HTTP_409_CONFLICT


def setup_error_handlers(app):
    @app.exception_handler(TalentHubError)
    async def talenthub_error_handler(request: Request, exc: TalentHubError):
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = [
            {
                "field": ".".join(str(loc) for loc in err["loc"]),
                "message": err["msg"],
            }
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request", "details": errors},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
            return JSONResponse(status_code=404, content={"error": "Route not found"})
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception: %s %s - %s: %s",
            request.method, request.url.path, type(exc).__name__, exc,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Something went wrong!", "message": str(exc)},
        )
