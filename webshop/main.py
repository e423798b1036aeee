"""Main FastAPI application."""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from webshop.catalog.client import close_catalog_client
from webshop.config import settings
from webshop.routes.tools import router as tools_router
from webshop.routes.user import router as user_router
from webshop.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting %s %s (catalog: %s)", settings.project_name, settings.api_version, settings.catalog_base_url)
    yield
    await close_catalog_client()


# Initialize FastAPI app
app = FastAPI(
    title=settings.project_name,
    version=settings.api_version,
    description="Per-user shopping cart with live catalog details and function-calling tools",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(user_router)
app.include_router(tools_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Webshop Cart API",
        "version": settings.api_version,
        "docs": "/docs"
    }


@app.head("/health")
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
