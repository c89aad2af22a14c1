from fastapi import Depends
from sqlalchemy.orm import Session
from app.application.analytics_service import AnalyticsService
from app.infrastructure.cache.metrics_cache import MetricsCache, metrics_cache
from app.infrastructure.database.session import get_db
from app.infrastructure.events.bus import EventBus, event_bus


def get_metrics_cache() -> MetricsCache:
    return metrics_cache


def get_event_bus() -> EventBus:
    return event_bus


def get_analytics_service(
    db: Session = Depends(get_db),
    cache: MetricsCache = Depends(get_metrics_cache),
) -> AnalyticsService:
    return AnalyticsService(db, cache)
