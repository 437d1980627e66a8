"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskpwa.api.v1 import push, sync, tasks
from taskpwa.config import Settings, settings as default_settings
from taskpwa.logging_setup import setup_logging
from taskpwa.middleware.metrics import setup_metrics
from taskpwa.services.push_registry import PushRegistry
from taskpwa.services.task_registry import TaskRegistry

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, registry: Optional[TaskRegistry] = None) -> FastAPI:
    """Build the application; the task registry lives as long as the app."""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        setup_logging(settings)
        logger.info(f"{settings.APP_NAME} {settings.APP_VERSION} started with {app.state.registry.count()} tasks")
        if not settings.VAPID_PUBLIC or not settings.VAPID_PRIVATE:
            logger.warning("VAPID keys not found, push subscriptions cannot be used")
        yield
        logger.info("Shutting down")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.registry = registry or TaskRegistry()
    app.state.push_registry = PushRegistry()
    if settings.SEED_DEMO_TASKS and registry is None:
        app.state.registry.seed_demo()

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_metrics(app)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        """Render errors with the ``{ok, error}`` envelope clients expect."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"ok": False, "error": exc.detail, "path": request.url.path},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={"ok": False, "error": "Validation error", "details": jsonable_errors(exc)},
        )

    # Include routers
    app.include_router(tasks.router, prefix=f"{settings.API_PREFIX}/tasks", tags=["tasks"])
    app.include_router(sync.router, prefix=f"{settings.API_PREFIX}/sync", tags=["sync"])
    app.include_router(push.router, prefix=settings.API_PREFIX, tags=["push"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "ok", "tasks": app.state.registry.count()}

    return app


def jsonable_errors(exc: RequestValidationError) -> list:
    """Validation errors without non-serialisable context objects."""
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]


app = create_app()
