import requests
from typing import Dict, Optional
import logging

from cineshelf.config import TMDB_API_KEY, TMDB_BASE_URL, TMDB_TIMEOUT_SECONDS
from cineshelf.utils.errors import UpstreamFetchError

logger = logging.getLogger(__name__)


# HTTP client for The Movie Database API
class TMDBClient:
    """
    Thin wrapper around requests bound to the TMDB base URL.
    Each call goes through requests.get unless a session is injected.
    Attaches the API key to every call and enforces a fixed timeout.
    No retries: one call to get() is one upstream request.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = TMDB_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = TMDB_API_KEY if api_key is None else api_key
        self.base_url = (base_url or TMDB_BASE_URL).rstrip("/")
        self.timeout = timeout
        self._session = session

        if not self.api_key:
            logger.warning("TMDB API key is not set! Please add TMDB_API_KEY to your .env file.")

    def get(self, endpoint: str, params: Optional[Dict] = None) -> Dict:
        """
        Make a GET request to the TMDB API.

        Args:
            endpoint: API endpoint (e.g., "/movie/popular")
            params: Query parameters

        Returns:
            Decoded JSON response from TMDB

        Raises:
            UpstreamFetchError: If the request fails, times out or returns a non-2xx status
        """
        query = dict(params or {})
        query['api_key'] = self.api_key
        url = f"{self.base_url}{endpoint}"

        try:
            http = self._session or requests
            response = http.get(url, params=query, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            logger.error(f"TMDB API error for {endpoint}: HTTP {status_code}")
            raise UpstreamFetchError(endpoint, status_code, str(e)) from e
        except requests.exceptions.RequestException as e:
            # Also covers JSON decode errors raised by response.json()
            logger.error(f"TMDB API error for {endpoint}: {str(e)}")
            raise UpstreamFetchError(endpoint, reason=str(e)) from e

        logger.debug(f"TMDB API request successful: {endpoint}")
        return data

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
