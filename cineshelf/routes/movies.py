from fastapi import APIRouter, Depends, Query, Path
from typing import Optional

from cineshelf.schemas.content import DiscoverFilters, MediaType, SortOption, TimeWindow
from cineshelf.services.tmdb_service import TMDBService
from cineshelf.utils.dependencies import get_tmdb_service

router = APIRouter(prefix="/api/movies", tags=["Movies"])


# ============================================
# Trending, Popular, Top Rated, Now Playing, Upcoming
# ============================================

@router.get("/trending")
def get_trending_movies(
    time_window: TimeWindow = Query(TimeWindow.WEEK, alias="timeWindow"),
    page: int = Query(1, ge=1, le=500),
    tmdb: TMDBService = Depends(get_tmdb_service)
):
    """Get trending movies (day/week)"""
    return {"success": True, "data": tmdb.get_trending(MediaType.MOVIE, time_window, page)}


@router.get("/popular")
def get_popular_movies(page: int = Query(1, ge=1, le=500), tmdb: TMDBService = Depends(get_tmdb_service)):
    """Get popular movies"""
    return {"success": True, "data": tmdb.get_popular(MediaType.MOVIE, page)}


@router.get("/top-rated")
def get_top_rated_movies(page: int = Query(1, ge=1, le=500), tmdb: TMDBService = Depends(get_tmdb_service)):
    """Get top rated movies"""
    return {"success": True, "data": tmdb.get_top_rated(MediaType.MOVIE, page)}


@router.get("/now-playing")
def get_now_playing_movies(page: int = Query(1, ge=1, le=500), tmdb: TMDBService = Depends(get_tmdb_service)):
    """Get movies currently in theaters"""
    return {"success": True, "data": tmdb.get_now_playing(page)}


@router.get("/upcoming")
def get_upcoming_movies(page: int = Query(1, ge=1, le=500), tmdb: TMDBService = Depends(get_tmdb_service)):
    """Get upcoming movies"""
    return {"success": True, "data": tmdb.get_upcoming(page)}


# ============================================
# Genres, Search & Discovery
# ============================================

@router.get("/genres")
def get_movie_genres(tmdb: TMDBService = Depends(get_tmdb_service)):
    """Get list of all movie genres"""
    return {"success": True, "data": tmdb.get_genres(MediaType.MOVIE)}


@router.get("/search")
def search_movies(
    query: str = Query(..., min_length=1, max_length=200, description="Search query"),
    page: int = Query(1, ge=1, le=500),
    tmdb: TMDBService = Depends(get_tmdb_service)
):
    """Search movies by title (never cached)"""
    return {"success": True, "data": tmdb.search(query, MediaType.MOVIE, page)}


@router.get("/discover")
def discover_movies(
    with_genres: Optional[str] = Query(None, description="Genre IDs (comma-separated)"),
    year: Optional[int] = Query(None, ge=1900, le=2100, description="Release year"),
    sort_by: SortOption = Query(SortOption.POPULARITY_DESC, description="Sort option"),
    page: int = Query(1, ge=1, le=500),
    tmdb: TMDBService = Depends(get_tmdb_service)
):
    """Discover movies with filters (never cached)"""
    filters = DiscoverFilters(with_genres=with_genres, year=year, sort_by=sort_by, page=page)
    return {"success": True, "data": tmdb.discover(MediaType.MOVIE, filters)}


# ============================================
# Movie Details (MUST be last - dynamic routes)
# ============================================

@router.get("/{movie_id}")
def get_movie_details(movie_id: int = Path(..., description="TMDB movie ID", gt=0), tmdb: TMDBService = Depends(get_tmdb_service)):
    """Get movie details by ID"""
    return {"success": True, "data": tmdb.get_movie_details(movie_id)}


@router.get("/{movie_id}/credits")
def get_movie_credits(movie_id: int = Path(..., description="TMDB movie ID", gt=0), tmdb: TMDBService = Depends(get_tmdb_service)):
    """Get cast and crew"""
    return {"success": True, "data": tmdb.get_credits(MediaType.MOVIE, movie_id)}


@router.get("/{movie_id}/videos")
def get_movie_videos(movie_id: int = Path(..., description="TMDB movie ID", gt=0), tmdb: TMDBService = Depends(get_tmdb_service)):
    """Get trailers, teasers and clips"""
    return {"success": True, "data": tmdb.get_videos(MediaType.MOVIE, movie_id)}


@router.get("/{movie_id}/similar")
def get_similar_movies(
    movie_id: int = Path(..., description="TMDB movie ID", gt=0),
    page: int = Query(1, ge=1, le=500),
    tmdb: TMDBService = Depends(get_tmdb_service)
):
    """Get movies similar to this one"""
    return {"success": True, "data": tmdb.get_similar(MediaType.MOVIE, movie_id, page)}


@router.get("/{movie_id}/recommendations")
def get_movie_recommendations(
    movie_id: int = Path(..., description="TMDB movie ID", gt=0),
    page: int = Query(1, ge=1, le=500),
    tmdb: TMDBService = Depends(get_tmdb_service)
):
    """Get TMDB recommendations for this movie"""
    return {"success": True, "data": tmdb.get_recommendations(MediaType.MOVIE, movie_id, page)}
