"""Error taxonomy and the FastAPI handlers that render it.

Every failure in the auth and item layers is raised as exactly one
AppError subclass. The handlers below turn them into a uniform body:

    {"error": "<code>", "detail": "<message>", "errors": [...]}

Internal causes (expired vs. tampered token, unknown email vs. wrong
password) never reach the client; they are logged where they happen.
"""

from dataclasses import asdict, dataclass
from typing import Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger()


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


class AppError(Exception):
    """Base class for request-scoped failures with a fixed HTTP mapping."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "internal_error"
    default_detail = "An unexpected error occurred"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    def to_response(self) -> dict:
        return {"error": self.code, "detail": self.detail}


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"
    default_detail = "Invalid request data"

    def __init__(self, errors: list[FieldError], detail: Optional[str] = None):
        self.errors = list(errors)
        if detail is None and self.errors:
            fields = ", ".join(e.field for e in self.errors)
            detail = f"Invalid value for: {fields}"
        super().__init__(detail)

    @property
    def fields(self) -> list[str]:
        return [e.field for e in self.errors]

    def to_response(self) -> dict:
        body = super().to_response()
        body["errors"] = [asdict(e) for e in self.errors]
        return body


class DuplicateIdentity(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "duplicate_identity"
    default_detail = "Email is already registered"


class InvalidCredentials(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_credentials"
    default_detail = "Invalid email or password"


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthenticated"
    default_detail = "Authentication required"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    default_detail = "Insufficient role"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_detail = "Resource not found"


# ─── Handlers ────────────────────────────────────────────


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        headers = None
        if isinstance(exc, Unauthenticated):
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_response(),
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ):
        errors = [
            FieldError(
                field=".".join(str(loc) for loc in e["loc"] if loc != "body"),
                message=e["msg"],
            )
            for e in exc.errors()
        ]
        logger.info(
            "http.validation_failed",
            path=request.url.path,
            fields=[e.field for e in errors],
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ValidationError(errors).to_response(),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # API misses get a structured body; everything else keeps the
        # framework's plain shape.
        if exc.status_code == 404 and _is_api_path(request.url.path):
            return JSONResponse(
                status_code=404,
                content={
                    "error": "api_route_not_found",
                    "detail": "API route not found",
                    "path": request.url.path,
                },
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("http.unhandled_error", path=request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=AppError().to_response(),
        )


def _is_api_path(path: str) -> bool:
    return path == "/api" or path.startswith("/api/")
