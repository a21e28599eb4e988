"""FastAPI application entry point."""

import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from recipekit.config import get_settings
from recipekit.database import async_engine
from recipekit.logging_config import (
    LoggingContext,
    clear_context,
    configure_logging,
    get_logger,
)
from recipekit.routers import (
    ingredients_router,
    search_router,
    shopping_lists_router,
)

settings = get_settings()

# Configure logging on module load
configure_logging(log_level=settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Starting Recipekit API")

    yield

    logger.info("Shutting down Recipekit API")
    await async_engine.dispose()


app = FastAPI(
    title="Recipekit API",
    description="Recipe quantity scaling, shopping list aggregation and search",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Tag every log line of a request with its request ID."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    clear_context()
    with LoggingContext(request_id=request_id):
        response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


app.include_router(ingredients_router)
app.include_router(shopping_lists_router)
app.include_router(search_router)


@app.get("/health")
async def health_check() -> dict:
    """Basic health check endpoint."""
    return {"status": "ok", "service": "recipekit-api"}


@app.get("/")
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": "Recipekit API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health",
    }
