import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from core import settings
from core.db import Database
from core.limits import BodySizeLimitMiddleware
from core.log import configure_logging
from posts import router as posts_router
from storage import DatabaseStorage, MemoryStorage, Storage, StorageError
from users import router as users_router

logger = logging.getLogger(__name__)


async def _open_storage() -> tuple[Storage, Database | None]:
    if settings.storage_backend() == "memory":
        logger.warning("storage_backend=memory data will not survive a restart")
        return MemoryStorage(), None

    min_size, max_size = settings.db_pool_sizes()
    database = Database(
        settings.database_url(),
        min_size=min_size,
        max_size=max_size,
        command_timeout=settings.db_command_timeout_s(),
    )
    await database.connect()
    if settings.create_schema_on_startup():
        try:
            await database.create_schema()
        except Exception:
            await database.close()
            raise
    return DatabaseStorage(database), database


def create_app(storage: Storage | None = None) -> FastAPI:
    """
    Build the API. Pass `storage` to skip opening a database (tests).
    """
    configure_logging(settings.log_level())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "storage", None) is not None:
            yield
            return

        # One store client per process, released on shutdown.
        app.state.storage, database = await _open_storage()
        try:
            yield
        finally:
            if database is not None:
                await database.close()
            app.state.storage = None

    app = FastAPI(title="Blog Content API", lifespan=lifespan)
    app.state.storage = storage

    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes())

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        path = request.url.path
        if path.startswith("/api"):
            duration_ms = (time.perf_counter() - start) * 1000
            logger.info(
                "%s %s %s in %.0fms",
                request.method,
                path,
                response.status_code,
                duration_ms,
            )
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Validation error", "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
        logger.error(
            "storage_failure method=%s path=%s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error."},
        )

    app.include_router(posts_router.router, prefix="/api", tags=["posts"])
    app.include_router(users_router.router, prefix="/api", tags=["users"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()
