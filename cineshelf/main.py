from fastapi import FastAPI, Request, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging

from cineshelf.config import ALLOWED_ORIGINS, ENVIRONMENT
from cineshelf.database import SessionLocal
from cineshelf.routes import movies, tv
from cineshelf.services.background_jobs import BackgroundJobService
from cineshelf.services.cache_store import ContentCacheStore
from cineshelf.services.cached_fetcher import CachedFetcher
from cineshelf.services.tmdb_client import TMDBClient
from cineshelf.services.tmdb_service import TMDBService
from cineshelf.utils.clock import utcnow
from cineshelf.utils.dependencies import get_background_jobs, get_cache_store
from cineshelf.utils.errors import StoreError, UpstreamFetchError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


# ============================================
# Application Lifespan Management
# ============================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Build the TMDB client, content cache and service once and share them
    through app.state; start and stop the cache maintenance jobs.
    """
    logger.info("CineShelf API starting...")
    logger.info(f"   Environment: {ENVIRONMENT}")
    logger.info(f"   CORS Origins: {len(ALLOWED_ORIGINS)} configured")

    client = TMDBClient()
    store = ContentCacheStore(SessionLocal)
    fetcher = CachedFetcher(client, store)
    app.state.cache_store = store
    app.state.tmdb_service = TMDBService(client, fetcher)
    app.state.background_jobs = BackgroundJobService(store)

    try:
        app.state.background_jobs.start()
    except Exception as e:
        logger.error(f"Failed to start background jobs: {str(e)}")

    yield

    logger.info("CineShelf API shutting down...")
    try:
        app.state.background_jobs.shutdown()
    except Exception as e:
        logger.error(f"Error stopping background jobs: {str(e)}")
    client.close()


app = FastAPI(
    title="CineShelf API",
    description="Movie and TV metadata backend with a cached TMDB proxy",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
)


# ============================================
# Exception Handlers
# ============================================

@app.exception_handler(UpstreamFetchError)
async def upstream_fetch_error_handler(request: Request, exc: UpstreamFetchError):
    logger.warning(f"Upstream failure on {request.method} {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=502,
        content={"success": False, "error": "Failed to fetch data from TMDB"}
    )


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error(f"Cache store failure on {request.method} {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error"}
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error"}
    )


# ============================================
# Routes
# ============================================

@app.get("/", tags=["Health"])
async def root():
    """Basic health check"""
    return {
        "message": "CineShelf API",
        "version": "1.0.0",
        "status": "healthy",
        "docs": "/docs"
    }


@app.get("/health", tags=["Health"])
def health_check(
    store: ContentCacheStore = Depends(get_cache_store),
    jobs: BackgroundJobService = Depends(get_background_jobs)
):
    """Detailed health check including content cache and purge job statistics"""
    now = utcnow()
    return {
        "status": "healthy",
        "api_version": "1.0.0",
        "timestamp": now.isoformat(),
        "cache": store.stats(now),
        "jobs": jobs.get_job_stats()
    }


app.include_router(movies.router)
app.include_router(tv.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
        log_level="info"
    )
