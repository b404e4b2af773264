"""
Cache-Fronted Fetcher
=====================
Read-through cache in front of the TMDB API.

The flow for every fetch():
1. Look up an unexpired entry for the cache key
2. Hit: return the stored payload, no network call
3. Miss: call TMDB once, store the payload with expires_at = now + ttl
4. Return the fresh payload

Upstream failures propagate as UpstreamFetchError and nothing is stored;
an expired entry is never served as a fallback. A failed cache write is
logged and the fresh payload is still returned.

Concurrent misses for the same key are not coalesced: each one calls TMDB
and the last write wins (the unique cache key keeps it to one row).
"""
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional
import logging

from cineshelf.services.cache_store import ContentCacheStore
from cineshelf.services.tmdb_client import TMDBClient
from cineshelf.utils.clock import utcnow
from cineshelf.utils.errors import StoreError

logger = logging.getLogger(__name__)


class CachedFetcher:
    """
    Serves TMDB responses from the content cache or fetches and stores them

    Usage:
        fetcher = CachedFetcher(TMDBClient(), ContentCacheStore(SessionLocal))
        movie = fetcher.fetch("/movie/550", "details_movie_550", timedelta(days=7))
    """

    def __init__(
        self,
        client: TMDBClient,
        store: ContentCacheStore,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.client = client
        self.store = store
        self.clock = clock

    def fetch(
        self,
        endpoint: str,
        cache_key: str,
        ttl: timedelta,
        params: Optional[Dict] = None,
        tmdb_id: int = 0,
        content_type: str = "general",
    ) -> Any:
        """
        Return cached data for cache_key, or fetch endpoint and cache it.

        Args:
            endpoint: TMDB path to call on a miss (path parameters substituted)
            cache_key: Deterministic identity of the request
            ttl: How long a fresh response stays valid
            params: Query parameters for the upstream call
            tmdb_id: Subject id stored with the entry (0 for lists)
            content_type: Subject kind stored with the entry

        Returns:
            The upstream response body

        Raises:
            ValueError: If ttl is negative
            UpstreamFetchError: If the upstream call fails on a miss
            StoreError: If the cache lookup fails
        """
        if ttl < timedelta(0):
            raise ValueError(f"ttl must not be negative, got {ttl}")

        now = self.clock()
        cached = self.store.get_valid(cache_key, now)
        if cached is not None:
            logger.info(f"Cache hit for: {cache_key}")
            return cached.data

        logger.info(f"Cache miss for: {cache_key}, fetching from TMDB: {endpoint}")
        data = self.client.get(endpoint, params)

        try:
            self.store.save(
                cache_key,
                data,
                cached_at=now,
                expires_at=now + ttl,
                tmdb_id=tmdb_id,
                content_type=content_type,
            )
        except StoreError as e:
            logger.warning(f"Serving uncached response for {cache_key}: {str(e)}")

        return data

    def invalidate(self, cache_key: str) -> bool:
        """
        Drop the cached entry for a key so the next fetch goes upstream.

        Returns:
            True if an entry was removed
        """
        removed = self.store.invalidate(cache_key)
        if removed:
            logger.info(f"Invalidated cache for: {cache_key}")
        return removed
