from sqlalchemy.orm import Session
from typing import Optional, List
from datetime import date
from app.domain.models.metrics import DailyMetrics
from app.domain.ports import MetricsStore
from app.infrastructure.database.models import DailyMetricsORM

# every DailyMetrics attribute stored 1:1 on the row
METRIC_COLUMNS = [
    "tasks_created", "tasks_completed", "tasks_completed_same_day", "completion_rate",
    "pomodoros_completed", "focus_minutes", "break_minutes", "interrupted_sessions",
    "late_night_sessions", "overwork_minutes", "consecutive_work_days",
    "morning_focus_minutes", "afternoon_focus_minutes", "evening_focus_minutes", "night_focus_minutes",
    "urgent_important", "not_urgent_important", "urgent_not_important", "not_urgent_not_important",
    "productivity_score", "focus_score", "burnout_risk_score",
]


def metrics_to_entity(model: DailyMetricsORM) -> DailyMetrics:
    data = {c: getattr(model, c) or 0 for c in METRIC_COLUMNS}
    return DailyMetrics(id=model.id, user_id=model.user_id, metric_date=model.metric_date, **data)


class MetricsRepository(MetricsStore):
    def __init__(self, db: Session):
        self.db = db

    def _get_orm(self, user_id: int, metric_date: date) -> Optional[DailyMetricsORM]:
        return self.db.query(DailyMetricsORM).filter(
            DailyMetricsORM.user_id == user_id,
            DailyMetricsORM.metric_date == metric_date,
        ).first()

    def find_daily_metrics(self, user_id: int, metric_date: date) -> Optional[DailyMetrics]:
        model = self._get_orm(user_id, metric_date)
        return metrics_to_entity(model) if model else None

    def save_daily_metrics(self, metrics: DailyMetrics) -> DailyMetrics:
        data = {c: getattr(metrics, c) for c in METRIC_COLUMNS}
        existing = self._get_orm(metrics.user_id, metrics.metric_date)
        if existing:
            for k, v in data.items():
                setattr(existing, k, v)
            self.db.commit()
            self.db.refresh(existing)
            return metrics_to_entity(existing)
        row = DailyMetricsORM(user_id=metrics.user_id, metric_date=metrics.metric_date, **data)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return metrics_to_entity(row)

    def list_between(self, user_id: int, start: date, end: date) -> List[DailyMetrics]:
        rows = self.db.query(DailyMetricsORM).filter(
            DailyMetricsORM.user_id == user_id,
            DailyMetricsORM.metric_date >= start,
            DailyMetricsORM.metric_date <= end,
        ).order_by(DailyMetricsORM.metric_date).all()
        return [metrics_to_entity(r) for r in rows]

    def delete_before(self, cutoff: date) -> int:
        deleted = self.db.query(DailyMetricsORM).filter(
            DailyMetricsORM.metric_date < cutoff
        ).delete(synchronize_session=False)
        self.db.commit()
        return deleted
