"""Users API - FastAPI Application."""

import time
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from users_api.config import settings
from users_api.database import engine, init_db
from users_api.deps import DbSession
from users_api.logger import configure_logging, get_logger
from users_api.routers import users

# Initialize logging early
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan - init DB on startup, release the pool on shutdown."""
    await init_db()
    logger.info("Application started", version=app.version, port=settings.port)
    yield
    await engine.dispose()
    logger.info("Application shutting down")


app = FastAPI(
    title="Users API",
    description="CRUD service over a single users table",
    version="0.1.0",
    lifespan=lifespan,
)


@app.middleware("http")
async def logging_middleware(request: Request, call_next: Any) -> Response:
    """Middleware to inject Request-ID and log request details."""
    request_id = request.headers.get("X-Request-ID", str(uuid4()))

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=request_id,
        method=request.method,
        path=request.url.path,
    )

    start_time = time.perf_counter()
    try:
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        logger.info(
            "HTTP Request",
            status_code=response.status_code,
            duration_ms=round(duration * 1000, 2),
        )

        response.headers["X-Request-ID"] = request_id
        return response
    except Exception as exc:
        duration = time.perf_counter() - start_time
        logger.exception(
            "HTTP Request Failed",
            duration_ms=round(duration * 1000, 2),
            error=str(exc),
        )
        raise


def error_body(status_code: int, detail: Any) -> dict[str, Any]:
    """Not-found responses carry `message`; every other failure carries `error`."""
    if status_code == 404:
        return {"message": detail}
    return {"error": detail}


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, exc.detail),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed requests (bad path id, non-object body) are plain 400s."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    logger.info("Request rejected", location=location, error_count=len(errors))
    return JSONResponse(
        status_code=400,
        content={"error": f"Invalid request data at {location}." if location else "Invalid request data."},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler to ensure JSON response."""
    # Only show exception details in DEBUG mode
    if settings.debug:
        detail = str(exc)
        trace = traceback.format_exc()
    else:
        detail = "An internal server error occurred. Please try again later."
        trace = None

    return JSONResponse(
        status_code=500,
        content={
            "error": detail,
            "trace": trace,
            "request_id": structlog.contextvars.get_contextvars().get("request_id"),
        },
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "X-Request-ID"],
)

app.include_router(users.router)
app.include_router(users.legacy_router)


@app.get("/health")
async def health_check(db: DbSession) -> Response:
    """Report 200 when the database answers, 503 otherwise."""
    checks = {}
    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = True
    except Exception as exc:
        logger.warning("Health check: database unreachable", error=str(exc), error_type=type(exc).__name__)
        checks["database"] = False

    all_healthy = all(checks.values())
    return JSONResponse(
        status_code=200 if all_healthy else 503,
        content={
            "status": "healthy" if all_healthy else "unhealthy",
            "timestamp": datetime.now(UTC).isoformat(),
            "checks": checks,
            "version": app.version,
        },
    )


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    import uvicorn

    uvicorn.run("users_api.main:app", host=settings.host, port=settings.port, reload=settings.debug)


if __name__ == "__main__":
    run()
