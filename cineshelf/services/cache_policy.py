"""
TMDB Cache Policy
=================
Per-endpoint-class TTL table and cache key construction.

Cache keys are a pure function of the logical request:

    {endpoint_class}_{media_type}[_{subject_id}][_page{page}][_{time_window}]

They never include wall-clock time or anything about the caller, so every
caller shares the same entry for the same request.

Usage:
    from cineshelf.services.cache_policy import EndpointClass, build_cache_key, ttl_for

    key = build_cache_key(EndpointClass.TRENDING, "movie", page=1, time_window="week")
    ttl = ttl_for(EndpointClass.TRENDING)  # timedelta(hours=6)
"""
from datetime import timedelta
from enum import Enum
from typing import Dict, Optional, Union

from cineshelf.schemas.content import MediaType, TimeWindow


class EndpointClass(str, Enum):
    """Upstream endpoint classes that share a caching policy"""
    TRENDING = "trending"
    POPULAR = "popular"
    TOP_RATED = "top_rated"
    UPCOMING = "upcoming"
    NOW_PLAYING = "now_playing"
    DETAILS = "details"
    CREDITS = "credits"
    VIDEOS = "videos"
    GENRES = "genres"
    SIMILAR = "similar"
    RECOMMENDATIONS = "recommendations"
    SEARCH = "search"
    DISCOVER = "discover"


# None means the class bypasses the cache entirely
TTL_POLICY: Dict[EndpointClass, Optional[timedelta]] = {
    EndpointClass.TRENDING: timedelta(hours=6),
    EndpointClass.POPULAR: timedelta(hours=12),
    EndpointClass.TOP_RATED: timedelta(hours=12),
    EndpointClass.UPCOMING: timedelta(hours=12),
    EndpointClass.NOW_PLAYING: timedelta(hours=3),
    EndpointClass.DETAILS: timedelta(days=7),
    EndpointClass.CREDITS: timedelta(days=7),
    EndpointClass.VIDEOS: timedelta(days=7),
    EndpointClass.GENRES: timedelta(days=30),
    EndpointClass.SIMILAR: timedelta(hours=24),
    EndpointClass.RECOMMENDATIONS: timedelta(hours=24),
    EndpointClass.SEARCH: None,
    EndpointClass.DISCOVER: None,
}


def ttl_for(endpoint_class: EndpointClass) -> Optional[timedelta]:
    """
    Get the TTL for an endpoint class.

    Returns:
        timedelta, or None when responses of this class are never cached
    """
    return TTL_POLICY[EndpointClass(endpoint_class)]


def is_cacheable(endpoint_class: EndpointClass) -> bool:
    return ttl_for(endpoint_class) is not None


def build_cache_key(
    endpoint_class: EndpointClass,
    media_type: Union[MediaType, str],
    subject_id: Optional[int] = None,
    page: Optional[int] = None,
    time_window: Union[TimeWindow, str, None] = None,
) -> str:
    """
    Build the cache key for a logical TMDB request.

    Args:
        endpoint_class: Endpoint class of the call (must be cacheable)
        media_type: "movie" or "tv"
        subject_id: TMDB id for subject-scoped endpoints (details, credits, ...)
        page: Page number for paginated endpoints
        time_window: "day" or "week" for trending

    Returns:
        Deterministic key, e.g. "similar_movie_550_page2"

    Raises:
        ValueError: If the class is not cached or an argument is out of range
    """
    endpoint_class = EndpointClass(endpoint_class)
    if not is_cacheable(endpoint_class):
        raise ValueError(f"Endpoint class '{endpoint_class.value}' is not cached")

    parts = [endpoint_class.value, MediaType(media_type).value]

    if subject_id is not None:
        if isinstance(subject_id, bool) or not isinstance(subject_id, int) or subject_id < 0:
            raise ValueError(f"Invalid subject id: {subject_id!r}")
        parts.append(str(subject_id))

    if page is not None:
        if isinstance(page, bool) or not isinstance(page, int) or page < 1:
            raise ValueError(f"Invalid page number: {page!r}")
        parts.append(f"page{page}")

    if time_window is not None:
        parts.append(TimeWindow(time_window).value)

    return "_".join(parts)
