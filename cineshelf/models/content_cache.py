"""
Content Cache Model for storing TMDB API responses locally
One row per logical upstream call, identified by its cache key
"""
import uuid
from datetime import datetime

from sqlalchemy import Column, Integer, String, JSON, DateTime, Index, UniqueConstraint
from cineshelf.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class ContentCache(Base):
    """
    Caches verbatim TMDB responses behind a per-endpoint TTL

    Attributes:
        id: Primary key (uuid4 string)
        tmdb_id: TMDB id of the cached subject, 0 for list/general endpoints
        content_type: "movie", "tv" or "general"
        cache_key: Logical identity of the upstream call (unique)
        data: Upstream response body, stored as-is
        cached_at: Write time (UTC)
        expires_at: cached_at + TTL of the endpoint class (UTC)
    """
    __tablename__ = "content_cache"

    id = Column(String(36), primary_key=True, default=_new_id)
    tmdb_id = Column(Integer, nullable=False, default=0)
    content_type = Column(String(20), nullable=False, default="general")
    cache_key = Column(String(255), nullable=False)
    data = Column(JSON, nullable=False)
    cached_at = Column(DateTime, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("cache_key", name="uq_content_cache_cache_key"),
        Index("ix_content_cache_subject", "tmdb_id", "content_type"),
    )

    def is_expired(self, now: datetime) -> bool:
        """An entry whose expiry equals now is already expired"""
        return self.expires_at <= now

    def __repr__(self):
        return f"<ContentCache(cache_key='{self.cache_key}', expires_at={self.expires_at})>"
