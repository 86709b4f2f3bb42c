"""Main FastAPI application"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI

from src.zander.api.endpoints import health, product_import
from src.zander.config import settings
from src.zander.logging_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting Zander API in {settings.APP_ENV} environment")
    settings.validate_secrets_for_production()
    yield
    logger.info("Shutting down Zander API")


app = FastAPI(
    title="Zander - Product Catalog Import",
    description="CSV product import with validation preview and duplicate handling",
    version="0.1.0",
    lifespan=lifespan
)

app.include_router(health.router, tags=["Health"])
app.include_router(product_import.router)


@app.get("/")
def root():
    return {
        "message": "Zander API",
        "environment": settings.APP_ENV,
        "docs": "/docs"
    }
