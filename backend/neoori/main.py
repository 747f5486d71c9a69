"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.gzip import GZipMiddleware

from neoori.api import router as api_router
from neoori.config import Settings, get_settings
from neoori.exceptions import AppError
from neoori.models.base import Database
from neoori.mongo import MongoConnection
from neoori.schemas.base import error_envelope
from neoori.services.auth_service import TokenService
from neoori.services.storage_service import LocalStorageService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    settings: Settings = app.state.settings
    logger.info("Starting %s...", settings.app_name)
    try:
        app.state.storage.ensure_directories()
        await app.state.database.create_all()
        logger.info("Database tables verified")
        await app.state.mongo.ensure_indexes()
    except Exception:
        logger.critical("Startup failed, shutting down", exc_info=True)
        raise
    yield
    logger.info("Shutting down...")
    await app.state.database.dispose()
    app.state.mongo.close()


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{field}: {first.get('msg')}" if field else str(first.get("msg"))


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return JSONResponse(status_code=exc.status_code, content=error_envelope(exc.message))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content=error_envelope(_first_validation_message(exc)))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_envelope(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content=error_envelope("Internal server error"))


def create_app(settings: Settings | None = None, mongo_client=None) -> FastAPI:
    """Build the application with its own connection handles.

    ``mongo_client`` lets callers supply an already-built motor-compatible client.
    """
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(
        title=settings.app_name,
        description="Accounts, profiles and uploads for the Neoori platform",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = Database(settings.database_url, echo=settings.debug)
    app.state.mongo = MongoConnection(settings.mongodb_url, settings.mongodb_database, client=mongo_client)
    app.state.tokens = TokenService(settings)
    app.state.storage = LocalStorageService(settings.upload_dir, settings.api_base_url)

    app.add_middleware(GZipMiddleware, minimum_size=500)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.debug:
        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            logger.debug("%s %s", request.method, request.url.path)
            return await call_next(request)

    register_exception_handlers(app)

    app.include_router(api_router)

    @app.get("/health")
    async def health_check():
        return {
            "success": True,
            "message": "Server is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/health/detailed")
    async def detailed_health_check():
        checks = {}

        # Relational store
        try:
            async with app.state.database.sessionmaker() as session:
                result = await session.execute(text("SELECT 1"))
                result.scalar()
                checks["database"] = {"ok": True}
        except Exception as e:
            checks["database"] = {"ok": False, "message": str(e)}

        # Document store
        try:
            await app.state.mongo.db.command("ping")
            checks["mongodb"] = {"ok": True}
        except Exception as e:
            checks["mongodb"] = {"ok": False, "message": str(e)}

        all_ok = all(check.get("ok", False) for check in checks.values())

        return {
            "success": all_ok,
            "data": {
                "status": "healthy" if all_ok else "degraded",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "checks": checks,
            },
        }

    return app


app = create_app()
