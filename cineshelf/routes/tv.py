from fastapi import APIRouter, Depends, Query, Path
from typing import Optional

from cineshelf.schemas.content import DiscoverFilters, MediaType, SortOption, TimeWindow
from cineshelf.services.tmdb_service import TMDBService
from cineshelf.utils.dependencies import get_tmdb_service

router = APIRouter(prefix="/api/tv", tags=["TV Shows"])


@router.get("/trending")
def get_trending_tv_shows(
    time_window: TimeWindow = Query(TimeWindow.WEEK, alias="timeWindow"),
    page: int = Query(1, ge=1, le=500),
    tmdb: TMDBService = Depends(get_tmdb_service)
):
    return {"success": True, "data": tmdb.get_trending(MediaType.TV, time_window, page)}


@router.get("/popular")
def get_popular_tv_shows(page: int = Query(1, ge=1, le=500), tmdb: TMDBService = Depends(get_tmdb_service)):
    return {"success": True, "data": tmdb.get_popular(MediaType.TV, page)}


@router.get("/top-rated")
def get_top_rated_tv_shows(page: int = Query(1, ge=1, le=500), tmdb: TMDBService = Depends(get_tmdb_service)):
    return {"success": True, "data": tmdb.get_top_rated(MediaType.TV, page)}


@router.get("/genres")
def get_tv_genres(tmdb: TMDBService = Depends(get_tmdb_service)):
    return {"success": True, "data": tmdb.get_genres(MediaType.TV)}


@router.get("/search")
def search_tv_shows(
    query: str = Query(..., min_length=1, max_length=200, description="Search query"),
    page: int = Query(1, ge=1, le=500),
    tmdb: TMDBService = Depends(get_tmdb_service)
):
    return {"success": True, "data": tmdb.search(query, MediaType.TV, page)}


@router.get("/discover")
def discover_tv_shows(
    with_genres: Optional[str] = Query(None, description="Genre IDs (comma-separated)"),
    year: Optional[int] = Query(None, ge=1900, le=2100, description="First air year"),
    sort_by: SortOption = Query(SortOption.POPULARITY_DESC, description="Sort option"),
    page: int = Query(1, ge=1, le=500),
    tmdb: TMDBService = Depends(get_tmdb_service)
):
    filters = DiscoverFilters(with_genres=with_genres, year=year, sort_by=sort_by, page=page)
    return {"success": True, "data": tmdb.discover(MediaType.TV, filters)}


# Dynamic routes last

@router.get("/{show_id}")
def get_tv_show_details(show_id: int = Path(..., description="TMDB TV show ID", gt=0), tmdb: TMDBService = Depends(get_tmdb_service)):
    return {"success": True, "data": tmdb.get_tv_details(show_id)}


@router.get("/{show_id}/credits")
def get_tv_show_credits(show_id: int = Path(..., description="TMDB TV show ID", gt=0), tmdb: TMDBService = Depends(get_tmdb_service)):
    return {"success": True, "data": tmdb.get_credits(MediaType.TV, show_id)}


@router.get("/{show_id}/videos")
def get_tv_show_videos(show_id: int = Path(..., description="TMDB TV show ID", gt=0), tmdb: TMDBService = Depends(get_tmdb_service)):
    return {"success": True, "data": tmdb.get_videos(MediaType.TV, show_id)}


@router.get("/{show_id}/similar")
def get_similar_tv_shows(
    show_id: int = Path(..., description="TMDB TV show ID", gt=0),
    page: int = Query(1, ge=1, le=500),
    tmdb: TMDBService = Depends(get_tmdb_service)
):
    return {"success": True, "data": tmdb.get_similar(MediaType.TV, show_id, page)}


@router.get("/{show_id}/recommendations")
def get_tv_show_recommendations(
    show_id: int = Path(..., description="TMDB TV show ID", gt=0),
    page: int = Query(1, ge=1, le=500),
    tmdb: TMDBService = Depends(get_tmdb_service)
):
    return {"success": True, "data": tmdb.get_recommendations(MediaType.TV, show_id, page)}
