"""FastAPI application entry point."""

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from copilot.api import chat, hotels, vector
from copilot.config import settings
from copilot.db.session import close_db, get_db, init_db
from copilot.dependencies import get_database_service, get_search_service, get_tool_registry
from copilot.errors import CopilotError
from copilot.schemas.api import HealthCheckResponse
from copilot.tools.implementations import index_saved_requests
from copilot.tools.registry import ToolRegistry
from copilot.utils.validation import create_safe_error_response
from copilot.vector.search_service import VectorSearchService

# Initialize OpenTelemetry if enabled
if settings.OTEL_ENABLED:
    from copilot.observability import init_telemetry
    init_telemetry(
        service_name=settings.OTEL_SERVICE_NAME,
        service_version=settings.OTEL_SERVICE_VERSION,
        environment=os.getenv("ENVIRONMENT", "development")
    )

# Setup logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Creates missing tables and loads saved maintenance requests into the
    similarity index on startup; disposes the connection pool on shutdown.
    """
    # ==================== STARTUP ====================
    logger.info(f"{settings.APP_NAME} v{settings.APP_VERSION} starting...")

    try:
        await init_db()
        logger.info("Database connection established")
    except Exception:
        logger.exception("Database initialization failed")
        raise

    try:
        loaded = await index_saved_requests(get_database_service(), get_search_service())
        logger.info(f"Indexed {loaded} saved maintenance requests")
    except Exception as e:
        # Search still works for new requests, don't fail startup
        logger.warning(f"Loading saved maintenance requests failed (non-fatal): {e}", exc_info=True)

    yield  # Application runs here

    # ==================== SHUTDOWN ====================
    logger.info(f"{settings.APP_NAME} shutting down...")
    try:
        await close_db()
        logger.info("Database connections closed")
    except Exception:
        logger.exception("Error closing database connections")

    logger.info("Shutdown complete")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Hotel maintenance copilot with vector similarity search",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(hotels.router)
app.include_router(vector.router)
app.include_router(chat.router)


@app.exception_handler(CopilotError)
async def copilot_error_handler(request: Request, exc: CopilotError) -> JSONResponse:
    """Map copilot errors to their HTTP status with a safe JSON body."""
    return JSONResponse(
        status_code=exc.status_code,
        content=create_safe_error_response(exc),
    )


@app.get("/", response_class=PlainTextResponse)
async def root() -> str:
    """Root endpoint."""
    logger.info("Received request for the default landing page")
    return "Welcome to the Contoso Suites Web API!"


@app.get("/health", response_model=HealthCheckResponse)
async def health_check(
    db: AsyncSession = Depends(get_db),
    search_service: VectorSearchService = Depends(get_search_service),
    registry: ToolRegistry = Depends(get_tool_registry),
) -> HealthCheckResponse:
    """
    Health check endpoint.

    Checks:
    - Database connectivity
    - Embedding service availability
    - Number of indexed maintenance requests
    """
    db_healthy = False
    try:
        await db.execute(text("SELECT 1"))
        db_healthy = True
    except Exception as e:
        logger.warning(f"Database health check failed: {e}", exc_info=True)

    embedding_healthy = await search_service.health_check()

    return HealthCheckResponse(
        status="healthy" if db_healthy else "unhealthy",
        service=settings.APP_NAME,
        version=settings.APP_VERSION,
        database=db_healthy,
        embedding_service=embedding_healthy,
        indexed_requests=len(search_service.index),
        registered_tools=len(registry),
    )


@app.get("/live")
async def liveness_check() -> dict:
    """Liveness probe for Kubernetes."""
    return {"status": "alive", "service": settings.APP_NAME}
