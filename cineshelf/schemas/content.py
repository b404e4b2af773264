"""
Content schemas shared by the TMDB service and the movie/TV routes
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from enum import Enum


# ============================================
# Enums for type-safe options
# ============================================

class MediaType(str, Enum):
    """TMDB media types served by this API"""
    MOVIE = "movie"
    TV = "tv"


class TimeWindow(str, Enum):
    """Time window for trending content"""
    DAY = "day"
    WEEK = "week"


class SortOption(str, Enum):
    """Available sort options for discovery"""
    POPULARITY_DESC = "popularity.desc"
    POPULARITY_ASC = "popularity.asc"
    VOTE_AVERAGE_DESC = "vote_average.desc"
    VOTE_AVERAGE_ASC = "vote_average.asc"
    RELEASE_DATE_DESC = "release_date.desc"
    RELEASE_DATE_ASC = "release_date.asc"


# ============================================
# Discover Filters
# ============================================

class DiscoverFilters(BaseModel):
    """
    Filters for the /discover endpoints
    Discovery results are never cached, so any combination is allowed
    """
    with_genres: Optional[str] = Field(
        None,
        description="Genre IDs (comma-separated, e.g., '28,12' for Action+Adventure)",
        json_schema_extra={"example": "28,12"}
    )
    year: Optional[int] = Field(None, ge=1900, le=2100, description="Release year")
    sort_by: SortOption = Field(default=SortOption.POPULARITY_DESC, description="Sort order")
    page: int = Field(default=1, ge=1, le=500, description="Page number")

    model_config = ConfigDict(use_enum_values=True)

    def to_tmdb_params(self, media_type: MediaType) -> dict:
        """Convert filters to TMDB query parameters"""
        params = {
            'sort_by': self.sort_by,
            'page': self.page,
        }
        if self.with_genres:
            params['with_genres'] = self.with_genres
        if self.year:
            # Movies and TV shows filter the year on different fields
            if media_type == MediaType.TV:
                params['first_air_date_year'] = self.year
            else:
                params['primary_release_year'] = self.year
        return params
