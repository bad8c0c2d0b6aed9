# This project was developed with assistance from AI tools.
"""FastAPI application entry point."""

import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from records import RecordNotFoundError, close_record_store, init_record_store
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .core.config import settings
from .core.errors import LendingError
from .routes import applications, health, invites, loans, queue
from .schemas.error import ErrorResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Application startup/shutdown lifecycle."""
    init_record_store()
    yield
    await close_record_store()


app = FastAPI(
    title="Loan Portal API",
    description="Loan team access, officer assignment and invite activation",
    version=__version__,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
)

_HTTP_STATUS_TITLES: dict[int, str] = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    409: "Conflict",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
    503: "Service Unavailable",
}


def _request_id(request: Request) -> str:
    return request.headers.get("x-request-id", str(uuid.uuid4()))


def _build_error(
    status_code: int, detail: str, request_id: str, details: dict | None = None
) -> ErrorResponse:
    return ErrorResponse(
        type="about:blank",
        title=_HTTP_STATUS_TITLES.get(status_code, "Error"),
        status=status_code,
        detail=detail,
        error=detail,
        request_id=request_id,
        details=details or {},
    )


def _error_response(status_code: int, body: ErrorResponse, request_id: str, headers=None):
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(),
        headers={"x-request-id": request_id, **(headers or {})},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Convert HTTPException to RFC 7807 Problem Details."""
    request_id = _request_id(request)
    body = _build_error(exc.status_code, str(exc.detail), request_id)
    return _error_response(exc.status_code, body, request_id, getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are bad input (400), reported as Problem Details."""
    request_id = _request_id(request)
    body = _build_error(
        status.HTTP_400_BAD_REQUEST,
        "Invalid request",
        request_id,
        {"errors": jsonable_encoder(exc.errors())},
    )
    return _error_response(status.HTTP_400_BAD_REQUEST, body, request_id)


@app.exception_handler(LendingError)
async def lending_error_handler(request: Request, exc: LendingError):
    """Map domain errors onto their HTTP status, carrying structured context."""
    request_id = _request_id(request)
    body = _build_error(exc.status_code, exc.detail, request_id, exc.extra)
    return _error_response(exc.status_code, body, request_id)


@app.exception_handler(RecordNotFoundError)
async def record_not_found_handler(request: Request, exc: RecordNotFoundError):
    """A record referenced by the request vanished mid-flight."""
    request_id = _request_id(request)
    body = _build_error(404, str(exc), request_id)
    return _error_response(404, body, request_id)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Catch-all for unhandled exceptions -- log and return 500."""
    request_id = _request_id(request)
    logger.exception("Unhandled exception (request_id=%s)", request_id)
    body = _build_error(500, "An unexpected error occurred.", request_id)
    return _error_response(500, body, request_id)


# Include routers
app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(applications.router, prefix="/api/applications", tags=["applications"])
app.include_router(loans.router, prefix="/api/loans", tags=["loans"])
app.include_router(queue.router, prefix="/api/queue", tags=["queue"])
app.include_router(invites.router, prefix="/api/invites", tags=["invites"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint"""
    return {"message": f"Welcome to {settings.APP_NAME}"}
