import logging
import sqlite3
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.api.deps import get_settings
from src.api.routes import analysis, auth, categories, news, tags, upload
from src.api.schemas import envelope, error_envelope
from src.domain.errors import DomainError
from src.rules.loader import load_rules
from src.rules.models import CorsRules

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = get_settings()

    # Load rules and migrate on startup (fail-fast)
    rules = load_rules(settings.rules_path)
    logger.info(
        "Rules loaded from %s (version %s)", settings.rules_path, rules.project.rules_version
    )

    applied = SQLiteMigrator(settings.db_path).run_migrations()
    if applied:
        logger.info("Applied migrations: %s", ", ".join(applied))

    yield


def _cors_rules() -> CorsRules:
    try:
        return load_rules(get_settings().rules_path).cors
    except (FileNotFoundError, ValueError):
        logger.warning("CORS origins unavailable; rules file could not be loaded")
        return CorsRules(allow_origins=[])


app = FastAPI(
    title="Financial Editorial API",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Error handling ---


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(exc.code, exc.message),
        headers=headers,
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(code, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    first: dict[str, Any] = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if location:
        message = f"{location}: {message}"
    return JSONResponse(status_code=422, content=error_envelope("VALIDATION_ERROR", message))


@app.exception_handler(sqlite3.Error)
async def storage_error_handler(request: Request, exc: sqlite3.Error) -> JSONResponse:
    logger.exception("Unhandled database error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500, content=error_envelope("STORAGE_ERROR", "Database error")
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500, content=error_envelope("INTERNAL_ERROR", "Internal server error")
    )


# --- Routers ---
app.include_router(news.router, prefix=f"{API_PREFIX}/news", tags=["News"])
app.include_router(analysis.router, prefix=f"{API_PREFIX}/analysis", tags=["Analysis"])
app.include_router(categories.router, prefix=f"{API_PREFIX}/categories", tags=["Categories"])
app.include_router(tags.router, prefix=f"{API_PREFIX}/tags", tags=["Tags"])
app.include_router(auth.router, prefix=f"{API_PREFIX}/auth", tags=["Auth"])
app.include_router(upload.router, prefix=f"{API_PREFIX}/upload", tags=["Upload"])


# CORS (Allow Frontend)
cors = _cors_rules()
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.allow_origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return envelope({"status": "ok", "service": "api"})


# Locally stored uploads
app.mount(
    "/media",
    StaticFiles(directory=str(get_settings().media_dir), check_dir=False),
    name="media",
)
