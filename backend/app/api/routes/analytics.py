from fastapi import APIRouter, Depends, HTTPException, Query, Request
from dataclasses import asdict
from datetime import date
from typing import List
from app.application.analytics_service import AnalyticsService
from app.domain.models.metrics import DailyMetrics
from app.domain.services.score_engine import ScoreEngine
from app.infrastructure.database.models import UserORM
from app.api.dependencies.auth import get_current_user
from app.api.dependencies.analytics import get_analytics_service
from app.api.dependencies.rate_limit import limiter, RECOMPUTE_LIMIT
from app.api.schemas import (
    DailyMetricsResponse, PeriodSummaryResponse, CompareRequest,
    ComparisonResponse, StreakResponse, MessageResponse
)
from app.core.exceptions import UserNotFoundError
from app.core.logging import get_logger

router = APIRouter(prefix="/analytics", tags=["Analytics"])
logger = get_logger(__name__)


def _to_response(metrics: DailyMetrics) -> DailyMetricsResponse:
    return DailyMetricsResponse(
        **asdict(metrics),
        burnout_label=ScoreEngine.burnout_label(metrics.burnout_risk_score),
    )


@router.get("/today", response_model=DailyMetricsResponse)
def get_today(
    service: AnalyticsService = Depends(get_analytics_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Today's metrics, computed on first request and cached until new activity."""
    try:
        return _to_response(service.daily(current_user.id, date.today()))
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/range", response_model=List[DailyMetricsResponse])
def get_range(
    days: int = Query(default=7, ge=1, le=90),
    service: AnalyticsService = Depends(get_analytics_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Daily metrics for the last N days, oldest first."""
    try:
        return [_to_response(m) for m in service.daily_range(current_user.id, days, date.today())]
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/summary", response_model=PeriodSummaryResponse)
def get_summary(
    start_date: date,
    end_date: date,
    service: AnalyticsService = Depends(get_analytics_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Per-day averages and totals over an inclusive date range."""
    if end_date < start_date:
        raise HTTPException(status_code=422, detail="end_date must not be before start_date")
    try:
        return service.summarize(current_user.id, start_date, end_date, date.today())
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/calculate/{target_date}", response_model=DailyMetricsResponse)
@limiter.limit(RECOMPUTE_LIMIT)
def calculate(
    request: Request,
    target_date: date,
    service: AnalyticsService = Depends(get_analytics_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Force a recompute of one day from the activity tables."""
    try:
        metrics = service.recalculate(current_user.id, target_date)
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    logger.info("Daily metrics recalculated", user_id=current_user.id, day=str(target_date))
    return _to_response(metrics)


@router.post("/compare", response_model=ComparisonResponse)
@limiter.limit(RECOMPUTE_LIMIT)
def compare(
    request: Request,
    data: CompareRequest,
    service: AnalyticsService = Depends(get_analytics_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Compare two periods: tasks, productivity, focus and burnout averages."""
    try:
        return service.compare(
            current_user.id,
            data.current.start_date, data.current.end_date,
            data.previous.start_date, data.previous.end_date,
            date.today(),
        )
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/refresh", response_model=MessageResponse)
def refresh(
    service: AnalyticsService = Depends(get_analytics_service),
    current_user: UserORM = Depends(get_current_user)
):
    """Drop every cached aggregate of the current user."""
    service.refresh(current_user.id)
    return {"message": "Analytics cache cleared"}


@router.get("/streak", response_model=StreakResponse)
def get_streak(
    service: AnalyticsService = Depends(get_analytics_service),
    current_user: UserORM = Depends(get_current_user)
):
    try:
        return service.streak(current_user.id, date.today())
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
