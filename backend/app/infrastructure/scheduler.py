"""
Nightly jobs: streak reset, daily metrics sweep and metrics retention.

Every user is processed with its own DB session so one failure never aborts
the sweep. Jobs are plain functions; APScheduler only decides when they run.
"""
from concurrent.futures import ThreadPoolExecutor
from datetime import date, timedelta
from typing import Callable, Dict, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.orm import Session

from app.application.analytics_service import AnalyticsService
from app.core.config import settings
from app.core.logging import get_logger
from app.domain.services.streak_tracker import StreakTracker
from app.infrastructure.cache.metrics_cache import MetricsCache, metrics_cache
from app.infrastructure.database.session import SessionLocal
from app.infrastructure.repositories.metrics_repository import MetricsRepository
from app.infrastructure.repositories.user_repository import UserRepository

logger = get_logger(__name__)

SessionFactory = Callable[[], Session]


# ──── Jobs ────────────────────────────────────────────────────────────────────
def _refresh_user_day(user_id: int, day: date, session_factory: SessionFactory, cache: MetricsCache) -> bool:
    db = session_factory()
    try:
        service = AnalyticsService(db, cache)
        metrics = service.recalculate(user_id, day)
        service.streaks.evaluate(user_id, day, metrics)
        return True
    except Exception as e:
        db.rollback()
        logger.error("Daily refresh failed for user", user_id=user_id, day=str(day), error=str(e))
        return False
    finally:
        db.close()


def run_metrics_sweep(
    day: Optional[date] = None,
    session_factory: SessionFactory = SessionLocal,
    cache: MetricsCache = metrics_cache,
    workers: Optional[int] = None,
) -> Dict[str, int]:
    """Computes day's metrics (default: yesterday) for every user, then evaluates their streak."""
    day = day or date.today() - timedelta(days=1)

    db = session_factory()
    try:
        user_ids = UserRepository(db).list_user_ids()
    finally:
        db.close()

    def _process(user_id: int) -> bool:
        return _refresh_user_day(user_id, day, session_factory, cache)

    workers = workers or settings.SWEEP_WORKERS
    if workers > 1 and len(user_ids) > 1:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="metrics-sweep") as pool:
            results = list(pool.map(_process, user_ids))
    else:
        results = [_process(uid) for uid in user_ids]

    success = sum(1 for ok in results if ok)
    errors = len(results) - success
    logger.info("Metrics sweep finished", day=str(day), success=success, errors=errors)
    return {"success": success, "errors": errors}


def run_streak_reset(
    today: Optional[date] = None,
    session_factory: SessionFactory = SessionLocal,
    cache: MetricsCache = metrics_cache,
) -> int:
    """
    Zeroes streaks that missed yesterday. Runs before the metrics sweep, so
    yesterday is computed for each candidate first.
    """
    today = today or date.today()
    yesterday = today - timedelta(days=1)

    db = session_factory()
    try:
        candidates = [u.id for u in UserRepository(db).list_users_with_broken_streaks(yesterday)]
    finally:
        db.close()
    for user_id in candidates:
        _refresh_user_day(user_id, yesterday, session_factory, cache)

    db = session_factory()
    try:
        count = StreakTracker(UserRepository(db), MetricsRepository(db)).reset_broken_streaks(today)
    finally:
        db.close()
    logger.info("Streak reset finished", day=str(today), checked=len(candidates), reset=count)
    return count


def run_metrics_cleanup(
    today: Optional[date] = None,
    session_factory: SessionFactory = SessionLocal,
    retention_days: Optional[int] = None,
) -> int:
    today = today or date.today()
    cutoff = today - timedelta(days=retention_days or settings.ANALYTICS_RETENTION_DAYS)
    db = session_factory()
    try:
        deleted = MetricsRepository(db).delete_before(cutoff)
    finally:
        db.close()
    logger.info("Old daily metrics deleted", cutoff=str(cutoff), deleted=deleted)
    return deleted


# ──── Scheduler ───────────────────────────────────────────────────────────────
def build_scheduler() -> BackgroundScheduler:
    scheduler = BackgroundScheduler()
    scheduler.add_job(
        run_streak_reset,
        CronTrigger(hour=settings.STREAK_SWEEP_HOUR, minute=settings.STREAK_SWEEP_MINUTE),
        id="streak_reset",
        replace_existing=True,
    )
    scheduler.add_job(
        run_metrics_sweep,
        CronTrigger(hour=settings.METRICS_SWEEP_HOUR, minute=settings.METRICS_SWEEP_MINUTE),
        id="metrics_sweep",
        replace_existing=True,
        max_instances=1,
    )
    scheduler.add_job(
        run_metrics_cleanup,
        CronTrigger(hour=settings.CLEANUP_HOUR, minute=settings.CLEANUP_MINUTE),
        id="metrics_cleanup",
        replace_existing=True,
    )
    return scheduler


_scheduler: Optional[BackgroundScheduler] = None


def start_scheduler() -> BackgroundScheduler:
    global _scheduler
    if _scheduler is None:
        _scheduler = build_scheduler()
        _scheduler.start()
        logger.info("Scheduler started", jobs=[job.id for job in _scheduler.get_jobs()])
    return _scheduler


def shutdown_scheduler():
    global _scheduler
    if _scheduler is not None:
        _scheduler.shutdown(wait=False)
        _scheduler = None
        logger.info("Scheduler stopped")
