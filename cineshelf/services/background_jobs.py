"""
Background Jobs Service for the TMDB content cache
Periodically removes expired rows from the content_cache table

Features:
- Scheduled jobs using APScheduler
- Configurable timezone and run hour
- Job monitoring and statistics
"""

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from datetime import datetime
import logging
import os
from typing import Callable, Dict
from pytz import timezone

from cineshelf.config import TIMEZONE
from cineshelf.services.cache_store import ContentCacheStore
from cineshelf.utils.clock import utcnow

logger = logging.getLogger(__name__)


class BackgroundJobService:
    """
    Manages scheduled maintenance jobs for the content cache

    Jobs:
    - Purge expired cache entries (daily, CACHE_PURGE_HOUR, default 4 AM)

    Usage:
        jobs = BackgroundJobService(store)
        jobs.start()  # Start all scheduled jobs
        jobs.shutdown()  # Stop all jobs gracefully
    """

    def __init__(self, store: ContentCacheStore, clock: Callable[[], datetime] = utcnow):
        """Initialize scheduler with timezone configuration"""
        self.store = store
        self.clock = clock
        self.timezone = timezone(TIMEZONE)
        self.scheduler = BackgroundScheduler(timezone=self.timezone)

        # Track job execution statistics
        self.job_stats = {
            'purge_expired_cache': {'last_run': None, 'status': 'idle', 'error': None, 'deleted': 0},
        }

    def start(self):
        """
        Start all scheduled background jobs

        Jobs are only started if ENABLE_BACKGROUND_JOBS=true in environment
        """
        if os.getenv("ENABLE_BACKGROUND_JOBS", "true").lower() != "true":
            logger.info("Background jobs disabled via ENABLE_BACKGROUND_JOBS environment variable")
            return

        purge_hour = int(os.getenv("CACHE_PURGE_HOUR", "4"))
        self.scheduler.add_job(
            func=self.purge_expired_cache,
            trigger=CronTrigger(hour=purge_hour, minute=0, timezone=self.timezone),
            id='purge_expired_cache',
            name='Purge expired TMDB cache entries',
            replace_existing=True,
            max_instances=1  # Prevent concurrent runs
        )
        logger.info(f"Scheduled: Purge expired cache (daily {purge_hour:02d}:00)")

        self.scheduler.start()
        logger.info(f"Background jobs started (timezone: {self.timezone}, active jobs: {len(self.scheduler.get_jobs())})")

    def shutdown(self):
        """Shutdown scheduler gracefully"""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=True)
            logger.info("Background jobs stopped gracefully")

    def get_job_stats(self) -> Dict:
        """
        Get statistics for all jobs including next run times

        Returns:
            Dict with job information and execution history
        """
        jobs_info = []
        for job in self.scheduler.get_jobs():
            stats = self.job_stats.get(job.id, {})
            jobs_info.append({
                'id': job.id,
                'name': job.name,
                'next_run': job.next_run_time.isoformat() if job.next_run_time else None,
                'last_run': stats.get('last_run'),
                'status': stats.get('status', 'idle'),
                'error': stats.get('error')
            })

        return {
            'scheduler_running': self.scheduler.running,
            'timezone': str(self.timezone),
            'jobs': jobs_info
        }

    # ============================================
    # Job Methods
    # ============================================

    def purge_expired_cache(self) -> int:
        """
        Delete content cache entries whose expiry has passed

        Returns:
            Number of deleted entries (0 when the job fails)
        """
        job_id = 'purge_expired_cache'
        self.job_stats[job_id]['status'] = 'running'
        self.job_stats[job_id]['error'] = None
        start_time = datetime.now()

        try:
            logger.info(f"[{job_id}] Starting expired cache purge...")
            deleted_count = self.store.purge_expired(self.clock())
            elapsed = (datetime.now() - start_time).total_seconds()

            logger.info(f"[{job_id}] Completed in {elapsed:.2f}s - Deleted {deleted_count} expired entries")

            self.job_stats[job_id]['status'] = 'success'
            self.job_stats[job_id]['deleted'] = deleted_count
            return deleted_count

        except Exception as e:
            elapsed = (datetime.now() - start_time).total_seconds()
            error_msg = str(e)

            logger.error(f"[{job_id}] Failed after {elapsed:.2f}s: {error_msg}")

            self.job_stats[job_id]['status'] = 'failed'
            self.job_stats[job_id]['error'] = error_msg
            return 0

        finally:
            self.job_stats[job_id]['last_run'] = datetime.now().isoformat()
