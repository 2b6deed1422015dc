# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the EMIS Questionnaire API.
# It configures the FastAPI application with middleware, routers, and handlers,
# and seeds indicators, questions and questionnaires on startup.
#
# Usage:
#   uvicorn app.main:app --reload
#   python -m app.main        (binds API_HOST:API_PORT)
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.dependencies import build_services, get_store
from app.exceptions import (
    AssessmentException,
    assessment_exception_handler,
    storage_exception_handler,
    validation_exception_handler,
)
from app.routers import health, indicators, questions, questionnaires
from core.services import seed_all
from lib.supabase_client import SupabaseClientError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


SERVICE_INFO = {
    "name": "emis-questionnaire",
    "title": "EMIS - Questionnaire",
    "description": (
        "A representation of indicators, questions and questionnaires used to "
        "assess need and situation of an emergency (or disaster) event."
    ),
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs on startup and shutdown:
    - Startup: Seed indicators, then questions, then questionnaires
    - Shutdown: Log only (the store client needs no cleanup)

    A seeding failure aborts startup.
    """
    # Startup
    logger.info(f"Starting EMIS Questionnaire API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    if settings.SEED_ON_STARTUP:
        store = app.dependency_overrides.get(get_store, get_store)()
        logger.info(f"Seeding from {settings.seeds_dir}")
        await seed_all(build_services(settings, store))

    yield

    # Shutdown
    logger.info("Shutting down EMIS Questionnaire API")


# Create FastAPI application
app = FastAPI(
    title=SERVICE_INFO["title"],
    description="""
## Emergency Assessment Questionnaires

Indicators, questions and questionnaires used to assess the need and
situation of an emergency (or disaster) event.

### Resources

| Resource | Description |
|----------|-------------|
| **Indicators** | Subject and topic a question measures |
| **Questions** | A single question, linked to one indicator |
| **Questionnaires** | An ordered set of questions |

### List Queries

```bash
curl "http://localhost:8000/questions?q=water&filter[stage]=During&sort=-updated_at&limit=10&page=2"
```
""",
    version=settings.API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Indicators",
            "description": "Subjects and topics measured by questions",
        },
        {
            "name": "Questions",
            "description": "Assessment questions",
        },
        {
            "name": "Questionnaires",
            "description": "Ordered sets of questions",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(AssessmentException)
async def handle_assessment_exception(request: Request, exc: AssessmentException):
    """Handle not found, validation, reference and duplicate errors."""
    return await assessment_exception_handler(request, exc)


@app.exception_handler(SupabaseClientError)
async def handle_storage_exception(request: Request, exc: SupabaseClientError):
    """Handle storage errors."""
    return await storage_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError):
    """Report malformed requests as 400."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Resource routers share one mount prefix (e.g. /v1)
API_PREFIX = settings.API_PREFIX.rstrip("/")

# Health check endpoints
app.include_router(
    health.router,
    tags=["Health"]
)

# Indicator endpoints
app.include_router(
    indicators.router,
    prefix=f"{API_PREFIX}/indicators",
    tags=["Indicators"]
)

# Question endpoints
app.include_router(
    questions.router,
    prefix=f"{API_PREFIX}/questions",
    tags=["Questions"]
)

# Questionnaire endpoints
app.include_router(
    questionnaires.router,
    prefix=f"{API_PREFIX}/questionnaires",
    tags=["Questionnaires"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns service metadata.
    """
    return {
        **SERVICE_INFO,
        "version": settings.API_VERSION,
        "docs": "/docs",
        "health": "/health",
    }


# =============================================================================
# Entry Point
# =============================================================================

def run() -> None:
    """Serve the app on API_HOST:API_PORT, reloading in development."""
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    run()
