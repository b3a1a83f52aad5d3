# /app/main.py

# --- Core FastAPI Imports ---
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# --- Application-specific Imports ---
from .core.config import Settings, get_settings
from .core.errors import ErrorCode, StorageUnavailable
from .core.security import TokenCodec
from .db.database import Database
from .routers import admin_router, auth_router, ratings_router, students_router, teachers_router
from .services.notifier import Notifier, build_notifier

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, notifier: Optional[Notifier] = None) -> FastAPI:
    """
    Builds the FastAPI application.

    Tests pass their own Settings (pointing at a temporary database) and a
    recording notifier; production uses the environment.
    """
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    # --- Application Lifecycle Management ---
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Runs once at startup: one engine for the whole process.
        database = Database(settings.database_url)
        database.create_all()
        app.state.database = database
        app.state.settings = settings
        app.state.token_codec = TokenCodec(settings.jwt_secret, settings.jwt_algorithm)
        app.state.notifier = notifier or build_notifier(settings)
        logger.info("Rating backend started")
        try:
            yield
        finally:
            # Runs once at shutdown.
            database.dispose()

    app = FastAPI(
        title="Teacher Rating Backend",
        description="Anonymous daily teacher ratings with OTP-gated administrator accounts.",
        version="1.0.0",
        lifespan=lifespan,
    )

    # --- Middleware Configuration ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StorageUnavailable)
    async def storage_unavailable_handler(request: Request, exc: StorageUnavailable):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": {"code": ErrorCode.STORAGE_UNAVAILABLE.value, "message": "Storage is unavailable. Please try again later."}},
        )

    # --- API Router Inclusion ---
    app.include_router(auth_router.router, prefix="/auth", tags=["Auth"])
    app.include_router(students_router.router, prefix="/students", tags=["Students"])
    app.include_router(teachers_router.router, prefix="/teachers", tags=["Teachers"])
    app.include_router(ratings_router.router, prefix="/ratings", tags=["Ratings"])
    app.include_router(admin_router.router, prefix="/admin", tags=["Admin"])

    # --- Root / Health Check Endpoint ---
    @app.get("/", tags=["Health Check"])
    async def read_root():
        """A simple health check endpoint to confirm the API is online."""
        return {"status": "Teacher Rating Backend is running!", "version": app.version}

    return app


app = create_app()
