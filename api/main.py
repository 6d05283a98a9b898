"""
kitchenCOGS FastAPI Application

Main entry point for the API server.
Run with: uvicorn api.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.config import get_settings
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.errors import setup_exception_handlers
from api.routers import admin, auth, cash, health, ingredients, purchases, recipes, reports, sales

# Configure logging
logging.basicConfig(
    level=getattr(logging, get_settings().log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()

    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    if settings.supabase_enabled:
        logger.info("Storage: Supabase")
    else:
        logger.warning("Storage: in-memory (Supabase not configured, data is lost on restart)")
    if not settings.openai_api_key:
        logger.info("Receipt scanning disabled (OPENAI_API_KEY not set)")

    yield

    # Shutdown
    logger.info("Shutting down...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="API for small food business costing: ingredients, recipes, purchases, sales and cash",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Custom middleware
    app.add_middleware(RequestLoggingMiddleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Include routers
    app.include_router(health.router, tags=["Health"])
    app.include_router(auth.router, prefix="/api/v1")
    app.include_router(
        ingredients.router,
        prefix="/api/v1/ingredients",
        tags=["Ingredients"]
    )
    app.include_router(
        recipes.router,
        prefix="/api/v1/recipes",
        tags=["Recipes"]
    )
    app.include_router(
        purchases.router,
        prefix="/api/v1/purchases",
        tags=["Purchases"]
    )
    app.include_router(
        sales.router,
        prefix="/api/v1/sales",
        tags=["Sales"]
    )
    app.include_router(
        cash.router,
        prefix="/api/v1/cash",
        tags=["Cash"]
    )
    app.include_router(
        reports.router,
        prefix="/api/v1/reports",
        tags=["Reports"]
    )
    app.include_router(
        admin.router,
        prefix="/api/v1/admin",
        tags=["Admin"]
    )

    return app


# Create the app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
