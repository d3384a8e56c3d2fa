"""
Listing Console - main application.

Serves the listing search UI and a JSON API over the remote listings API.
"""
import logging
import sys
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .client import ListingsApiClient, ListingsApiError
from .config import config
from .routes import listings_router, ui_router
from .store import ListingStore, get_store

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler(config.LOG_FILE)
    ]
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    # Startup
    logger.info("Starting Listing Console...")
    client = None
    try:
        config.validate()
        client = ListingsApiClient()
        app.state.store = ListingStore(client, config.CACHE_TTL_SECONDS)
        logger.info(f"Listings API: {config.LISTINGS_API_URL}")
        logger.info("Console startup complete")
        yield
    except Exception as e:
        logger.error(f"Startup failed: {e}")
        raise
    finally:
        # Shutdown
        logger.info("Shutting down Listing Console...")
        if client is not None:
            await client.close()


# Create FastAPI application
app = FastAPI(
    title=config.API_TITLE,
    version=config.API_VERSION,
    description=config.API_DESCRIPTION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=config.CORS_ALLOW_CREDENTIALS,
    allow_methods=config.CORS_ALLOW_METHODS,
    allow_headers=config.CORS_ALLOW_HEADERS,
)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request, exc: Exception):
    """Global exception handler for unhandled errors."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )


# Health check endpoint
@app.get("/health")
async def health_check(store: ListingStore = Depends(get_store)):
    """Health check endpoint."""
    try:
        records = await store.get_all()
        return {
            "status": "healthy",
            "version": config.API_VERSION,
            "listings": len(records)
        }
    except ListingsApiError as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(status_code=503, detail="Service unavailable")


# Include routers
app.include_router(ui_router)
app.include_router(listings_router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "console.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=config.LOG_LEVEL.lower()
    )
