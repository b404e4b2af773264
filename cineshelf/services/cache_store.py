"""
Content cache store backed by the content_cache table.

Every operation opens its own session from the injected factory and
commits, rolls back and closes it before returning. Database failures are
re-raised as StoreError.
"""
from datetime import datetime
from typing import Any, Callable, Dict, Optional
import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from cineshelf.models.content_cache import ContentCache
from cineshelf.utils.errors import StoreError

logger = logging.getLogger(__name__)


class ContentCacheStore:
    """
    Durable key/value store for TMDB responses

    Usage:
        store = ContentCacheStore(SessionLocal)
        entry = store.get_valid("details_movie_550", now)
        store.save("details_movie_550", data, cached_at=now, expires_at=now + ttl)
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get_valid(self, cache_key: str, now: datetime) -> Optional[ContentCache]:
        """
        Get the unexpired entry for a cache key.

        Args:
            cache_key: Logical identity of the upstream call
            now: Current time; entries with expires_at <= now are ignored

        Returns:
            Detached ContentCache instance or None
        """
        db = self.session_factory()
        try:
            return db.query(ContentCache).filter(
                ContentCache.cache_key == cache_key,
                ContentCache.expires_at > now
            ).first()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Cache lookup failed for {cache_key}: {str(e)}")
            raise StoreError("lookup", cache_key) from e
        finally:
            db.close()

    def save(
        self,
        cache_key: str,
        data: Any,
        cached_at: datetime,
        expires_at: datetime,
        tmdb_id: int = 0,
        content_type: str = "general",
    ) -> None:
        """
        Insert or replace the entry for a cache key.

        An existing row (expired or not) gets the new payload and expiry, so
        each key maps to exactly one row.
        """
        values = {
            'tmdb_id': tmdb_id,
            'content_type': content_type,
            'data': data,
            'cached_at': cached_at,
            'expires_at': expires_at,
        }

        db = self.session_factory()
        try:
            for attempt in range(2):
                try:
                    self._update_or_create(db, cache_key, values)
                    db.commit()
                    return
                except IntegrityError as e:
                    db.rollback()
                    if attempt:
                        raise StoreError("write", cache_key) from e
                    # A concurrent miss inserted the same key first
                    logger.debug(f"Cache key {cache_key} inserted concurrently, retrying as update")
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Cache write failed for {cache_key}: {str(e)}")
            raise StoreError("write", cache_key) from e
        finally:
            db.close()

    def invalidate(self, cache_key: str) -> bool:
        """
        Delete the entry for a cache key.

        Returns:
            True if a row was deleted
        """
        db = self.session_factory()
        try:
            deleted = db.query(ContentCache).filter(
                ContentCache.cache_key == cache_key
            ).delete(synchronize_session=False)
            db.commit()
            return deleted > 0
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreError("invalidate", cache_key) from e
        finally:
            db.close()

    def purge_expired(self, now: datetime) -> int:
        """
        Delete every entry that has expired.

        Returns:
            Number of deleted rows
        """
        db = self.session_factory()
        try:
            deleted = db.query(ContentCache).filter(
                ContentCache.expires_at <= now
            ).delete(synchronize_session=False)
            db.commit()
            return deleted
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreError("purge") from e
        finally:
            db.close()

    def stats(self, now: datetime) -> Dict:
        """
        Get cache table statistics.

        Returns:
            Dictionary with total/valid/expired counts and valid entries per content type
        """
        db = self.session_factory()
        try:
            total = db.query(ContentCache).count()
            valid = db.query(ContentCache).filter(ContentCache.expires_at > now).count()
            by_type = db.query(
                ContentCache.content_type, func.count(ContentCache.id)
            ).filter(
                ContentCache.expires_at > now
            ).group_by(ContentCache.content_type).all()

            return {
                'total_entries': total,
                'valid_entries': valid,
                'expired_entries': total - valid,
                'by_content_type': {content_type: count for content_type, count in by_type},
            }
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreError("stats") from e
        finally:
            db.close()

    # ============================================
    # Helper Methods
    # ============================================

    @staticmethod
    def _update_or_create(db: Session, cache_key: str, values: Dict) -> None:
        existing = db.query(ContentCache).filter(
            ContentCache.cache_key == cache_key
        ).first()

        if existing:
            for key, value in values.items():
                setattr(existing, key, value)
        else:
            db.add(ContentCache(cache_key=cache_key, **values))
        db.flush()
