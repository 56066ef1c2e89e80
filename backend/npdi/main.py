"""
NPDI Submission Engine - FastAPI application

Serves template resolution, submission validation and form render plans.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config.settings import settings
from .api.routes import api_router
from .api.middleware import CorrelationIdMiddleware, register_error_handlers
from .api.middleware.correlation import CORRELATION_HEADER
from .repositories.mongo_client import (
    create_indexes, close_connection, health_check, supports_transactions
)
from .utils.logger import setup_logging, get_logger
from .utils.time import utc_now, format_iso

setup_logging()
logger = get_logger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create indexes (including single_default_template) on startup, close the client on shutdown"""
    try:
        create_indexes()
        if not supports_transactions():
            logger.warning(
                "MongoDB is a standalone server: default template changes run without a "
                "transaction and rely on the single_default_template index"
            )
    except Exception as e:
        logger.error(f"MongoDB startup checks failed: {e}")
    
    logger.info(f"NPDI submission engine {VERSION} started ({settings.environment})")
    yield
    close_connection()


def create_app() -> FastAPI:
    application = FastAPI(
        title="NPDI Submission Engine",
        description="Template resolution and submission validation for product introduction tickets",
        version=VERSION,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        openapi_url="/api/openapi.json" if settings.debug else None,
    )
    
    # Credentials cannot be combined with a wildcard origin
    allow_all = settings.cors_origins.strip() == "*"
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_origins_list,
        allow_credentials=not allow_all,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=[CORRELATION_HEADER],
    )
    application.add_middleware(CorrelationIdMiddleware)
    register_error_handlers(application)
    
    application.include_router(api_router, prefix="/api/v1")
    
    @application.get("/health", tags=["Health"])
    async def health():
        mongo = health_check()
        return {
            "status": "healthy" if mongo["status"] == "healthy" else "degraded",
            "version": VERSION,
            "time": format_iso(utc_now()),
            "mongo": mongo,
        }
    
    return application


app = create_app()
