import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from geophoto.api.api import api_router
from geophoto.api.errors import init_error_handlers
from geophoto.core.config import configs
from geophoto.db.database import engine

logger = logging.getLogger(__name__)


def init_cors(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=configs.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def init_routers(app: FastAPI) -> None:
    app.include_router(api_router, prefix="/api")

    @app.get("/", tags=["Root"])
    async def read_root():
        return {
            "message": "Welcome to the Geophoto Map API!",
            "docs_url": "/docs",
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}


def init_monitoring(app: FastAPI) -> None:
    Instrumentator().instrument(app).expose(app)


def init_log_filter() -> None:
    class EndpointFilter(logging.Filter):
        def filter(self, record: logging.LogRecord) -> bool:
            return "GET /metrics" not in record.getMessage()

    logging.getLogger("uvicorn.access").addFilter(EndpointFilter())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    logger.info(f"Starting {configs.APP_NAME} ({configs.ENVIRONMENT}), storage: {configs.STORAGE_TYPE}")
    yield
    logger.info("Shutting down application lifespan...")
    await engine.dispose()
    logger.info("Database engine disposed.")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Geophoto Map API",
        description="Upload geotagged photos, browse them on a map and discuss them.",
        version="1.0.0",
        lifespan=lifespan,
    )

    init_routers(app=app)
    init_error_handlers(app=app)
    init_monitoring(app=app)
    init_log_filter()
    init_cors(app=app)
    return app
