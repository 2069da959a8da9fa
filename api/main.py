"""
FastAPI application initialization
"""

from fastapi import FastAPI
from api.routes import health, products
from core.config import settings
from core.logging import setup_logging
from ingestion.entities import ENTITY_KINDS
from ingestion.loaders.kv_store import KeyValueStore
from ingestion.scheduler import SyncScheduler
import logging

setup_logging()

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Catalog Sync API",
    description="Merged view of the catalog and pricing records synced from the supplier API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Initialize Scheduler
scheduler = SyncScheduler()


# Include routers
app.include_router(health.router)
app.include_router(products.router)


@app.on_event("startup")
async def startup_event():
    """Application startup event"""
    logger.info("Starting Catalog Sync API")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    store = KeyValueStore(settings.DATABASE_URL, settings.STORE_LOCK_TIMEOUT)
    await store.initialize(kind.collection_name for kind in ENTITY_KINDS)

    if settings.SCHEDULER_ENABLED:
        scheduler.start()


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown event"""
    logger.info("Shutting down Catalog Sync API")
    scheduler.stop()


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Catalog Sync API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "products": "/products",
            "product": "/products/{sku}"
        }
    }
