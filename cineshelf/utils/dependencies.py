from fastapi import Request

from cineshelf.services.background_jobs import BackgroundJobService
from cineshelf.services.cache_store import ContentCacheStore
from cineshelf.services.tmdb_service import TMDBService


# Dependency to get the TMDB service built at startup
def get_tmdb_service(request: Request) -> TMDBService:
    return request.app.state.tmdb_service


# Dependency to get the content cache store built at startup
def get_cache_store(request: Request) -> ContentCacheStore:
    return request.app.state.cache_store


# Dependency to get the cache maintenance jobs started at startup
def get_background_jobs(request: Request) -> BackgroundJobService:
    return request.app.state.background_jobs
