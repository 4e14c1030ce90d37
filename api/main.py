"""
Pasarantar FastAPI Application

Main entry point for the API server.
Run with: uvicorn api.main:app --reload
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.config import get_settings
from api.middleware.errors import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.routers import (
    cost_components,
    health,
    hpp,
    orders,
    procurement,
    products,
    reports,
    transactions,
)
from pasarantar.storage import init_database

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

    for dir_path in [settings.data_dir, settings.upload_dir, settings.export_dir]:
        os.makedirs(dir_path, exist_ok=True)
    init_database(settings.database_path)

    yield

    # Shutdown
    logger.info("Shutting down...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Pricing (HPP), stock, ledger and reporting API for the Pasarantar back office",
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
    app.include_router(
        cost_components.router,
        prefix="/api/v1/cost-components",
        tags=["Cost Components"]
    )
    app.include_router(
        hpp.router,
        prefix="/api/v1/hpp",
        tags=["HPP Calculator"]
    )
    app.include_router(
        products.router,
        prefix="/api/v1/products",
        tags=["Products"]
    )
    app.include_router(
        transactions.router,
        prefix="/api/v1/transactions",
        tags=["Transactions"]
    )
    app.include_router(
        orders.router,
        prefix="/api/v1/orders",
        tags=["Orders"]
    )
    app.include_router(
        procurement.router,
        prefix="/api/v1/procurement",
        tags=["Procurement"]
    )
    app.include_router(
        reports.router,
        prefix="/api/v1/reports",
        tags=["Reports"]
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
