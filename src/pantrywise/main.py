"""FastAPI application entry point."""

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from uuid import uuid4

import uvicorn

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from pantrywise.config import Settings, load_settings
from pantrywise.database import Database
from pantrywise.ingest.extractors import build_receipt_extractor
from pantrywise.ingest.repository import PurchaseHistoryRepository
from pantrywise.logging_config import LoggingContext, configure_logging, get_logger
from pantrywise.nutrition.repository import (
    MealLogRepository,
    PlannedMealRepository,
    UserPreferenceRepository,
)
from pantrywise.nutrition.service import NutritionService
from pantrywise.routers import (
    nutrition_router,
    pantry_router,
    quantities_router,
    receipts_router,
    search_router,
    shopping_lists_router,
)
from pantrywise.search.service import GlobalSearchService

logger = get_logger(__name__)

API_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    # Startup
    logger.info("Starting Pantrywise API")

    database: Database = app.state.database
    await database.create_tables()
    logger.info("Database tables initialized")

    yield

    # Shutdown
    logger.info("Shutting down Pantrywise API")
    await database.dispose()


def init_state(app: FastAPI, settings: Settings) -> None:
    """Build the database, services and receipt extractor once for this app."""
    database = Database(settings)
    session_factory = database.session_factory

    app.state.settings = settings
    app.state.database = database
    app.state.search_service = GlobalSearchService(session_factory)
    app.state.nutrition_service = NutritionService(
        meal_logs=MealLogRepository(session_factory),
        planned_meals=PlannedMealRepository(session_factory),
        preferences=UserPreferenceRepository(session_factory),
        tolerance_percent=settings.nutrition_tolerance_percent,
        adherence_window_days=settings.nutrition_adherence_window_days,
    )
    app.state.receipt_extractor = build_receipt_extractor(settings)
    app.state.purchase_history = PurchaseHistoryRepository(session_factory)


async def logging_context_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Tag every log line emitted while handling a request."""
    request_id = request.headers.get("x-request-id") or uuid4().hex[:12]
    with LoggingContext(request_id=request_id, user_id=request.headers.get("x-user-id")):
        response = await call_next(request)
    response.headers["X-Request-Id"] = request_id
    return response


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create the API application from explicit or environment settings."""
    settings = settings or load_settings()
    configure_logging(log_level=settings.log_level, environment=settings.environment)

    app = FastAPI(
        title="Pantrywise API",
        description="Receipt, pantry and recipe quantity normalization",
        version=API_VERSION,
        lifespan=lifespan,
    )
    init_state(app, settings)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(logging_context_middleware)

    # Include routers
    app.include_router(search_router)
    app.include_router(nutrition_router)
    app.include_router(quantities_router)
    app.include_router(pantry_router)
    app.include_router(shopping_lists_router)
    app.include_router(receipts_router)

    @app.get("/health")
    async def health_check() -> dict:
        """Basic health check endpoint."""
        return {"status": "ok", "service": "pantrywise-api"}

    @app.get("/")
    async def root() -> dict:
        """Root endpoint with API information."""
        return {
            "name": "Pantrywise API",
            "version": API_VERSION,
            "docs": "/docs",
            "health": "/health",
        }

    return app


def run() -> None:
    """Serve the API with uvicorn using environment settings."""
    settings = load_settings()
    uvicorn.run(
        create_app(settings),
        host="0.0.0.0",
        port=8000,
        log_config=None,
    )
