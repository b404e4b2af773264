from typing import Dict, List, Optional
import logging

from cineshelf.schemas.content import DiscoverFilters, MediaType, TimeWindow
from cineshelf.services.cache_policy import EndpointClass, build_cache_key, ttl_for
from cineshelf.services.cached_fetcher import CachedFetcher
from cineshelf.services.tmdb_client import TMDBClient

logger = logging.getLogger(__name__)


# TMDB Service to access The Movie Database through the content cache
class TMDBService:
    """
    One method per TMDB call site. Each method picks its endpoint class,
    builds the cache key and takes the TTL from the cache policy.
    Search and discover always go straight to TMDB.

    Built once at startup (see cineshelf.main) and shared by reference.
    """

    def __init__(self, client: TMDBClient, fetcher: CachedFetcher):
        self.client = client
        self.fetcher = fetcher

    def _cached(
        self,
        endpoint_class: EndpointClass,
        endpoint: str,
        media_type: MediaType,
        subject_id: Optional[int] = None,
        page: Optional[int] = None,
        time_window: Optional[TimeWindow] = None,
    ) -> Dict:
        """Fetch an endpoint through the cache using the policy for its class"""
        cache_key = build_cache_key(endpoint_class, media_type, subject_id, page, time_window)
        params = {'page': page} if page is not None else None
        return self.fetcher.fetch(
            endpoint,
            cache_key,
            ttl_for(endpoint_class),
            params=params,
            tmdb_id=subject_id or 0,
            content_type=MediaType(media_type).value,
        )

    # ============================================
    # Lists
    # ============================================

    def get_trending(
        self,
        media_type: MediaType,
        time_window: TimeWindow = TimeWindow.WEEK,
        page: int = 1,
    ) -> Dict:
        """Trending movies or TV shows. Cached for 6 hours."""
        media = MediaType(media_type).value
        window = TimeWindow(time_window).value
        return self._cached(
            EndpointClass.TRENDING, f"/trending/{media}/{window}", media_type,
            page=page, time_window=time_window,
        )

    def get_popular(self, media_type: MediaType, page: int = 1) -> Dict:
        """Popular movies or TV shows. Cached for 12 hours."""
        media = MediaType(media_type).value
        return self._cached(EndpointClass.POPULAR, f"/{media}/popular", media_type, page=page)

    def get_top_rated(self, media_type: MediaType, page: int = 1) -> Dict:
        """Top rated movies or TV shows. Cached for 12 hours."""
        media = MediaType(media_type).value
        return self._cached(EndpointClass.TOP_RATED, f"/{media}/top_rated", media_type, page=page)

    def get_now_playing(self, page: int = 1) -> Dict:
        """Movies currently in theaters. Changes often, cached for 3 hours."""
        return self._cached(EndpointClass.NOW_PLAYING, "/movie/now_playing", MediaType.MOVIE, page=page)

    def get_upcoming(self, page: int = 1) -> Dict:
        """Movies coming soon to theaters. Cached for 12 hours."""
        return self._cached(EndpointClass.UPCOMING, "/movie/upcoming", MediaType.MOVIE, page=page)

    # ============================================
    # Subject details
    # ============================================

    def get_movie_details(self, movie_id: int) -> Dict:
        """Movie details rarely change, cached for 7 days."""
        return self._cached(EndpointClass.DETAILS, f"/movie/{movie_id}", MediaType.MOVIE, subject_id=movie_id)

    def get_tv_details(self, show_id: int) -> Dict:
        """TV show details including seasons and networks. Cached for 7 days."""
        return self._cached(EndpointClass.DETAILS, f"/tv/{show_id}", MediaType.TV, subject_id=show_id)

    def get_credits(self, media_type: MediaType, subject_id: int) -> Dict:
        """Cast and crew. Cached for 7 days."""
        media = MediaType(media_type).value
        return self._cached(
            EndpointClass.CREDITS, f"/{media}/{subject_id}/credits", media_type, subject_id=subject_id
        )

    def get_videos(self, media_type: MediaType, subject_id: int) -> Dict:
        """Trailers, teasers and clips. Cached for 7 days."""
        media = MediaType(media_type).value
        return self._cached(
            EndpointClass.VIDEOS, f"/{media}/{subject_id}/videos", media_type, subject_id=subject_id
        )

    def get_similar(self, media_type: MediaType, subject_id: int, page: int = 1) -> Dict:
        """Titles similar to a movie or show. Cached for 24 hours."""
        media = MediaType(media_type).value
        return self._cached(
            EndpointClass.SIMILAR, f"/{media}/{subject_id}/similar", media_type,
            subject_id=subject_id, page=page,
        )

    def get_recommendations(self, media_type: MediaType, subject_id: int, page: int = 1) -> Dict:
        """TMDB recommendations for a movie or show. Cached for 24 hours."""
        media = MediaType(media_type).value
        return self._cached(
            EndpointClass.RECOMMENDATIONS, f"/{media}/{subject_id}/recommendations", media_type,
            subject_id=subject_id, page=page,
        )

    def get_genres(self, media_type: MediaType) -> List[Dict]:
        """
        Get list of all genres for a media type.
        Genres almost never change, cached for 30 days.
        """
        media = MediaType(media_type).value
        response = self._cached(EndpointClass.GENRES, f"/genre/{media}/list", media_type)
        return response.get('genres', [])

    # ============================================
    # Uncached
    # ============================================

    def search(self, query: str, media_type: MediaType, page: int = 1) -> Dict:
        """
        Search movies or TV shows by title.
        Not cached: every query is different.
        """
        media = MediaType(media_type).value
        return self.client.get(f"/search/{media}", {'query': query, 'page': page})

    def discover(self, media_type: MediaType, filters: Optional[DiscoverFilters] = None) -> Dict:
        """
        Discover movies or TV shows with filters (genre, year, sort).
        Not cached: the filter space is too large to share entries.
        """
        media = MediaType(media_type)
        filters = filters or DiscoverFilters()
        return self.client.get(f"/discover/{media.value}", filters.to_tmdb_params(media))
