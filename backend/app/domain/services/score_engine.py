"""
Score Engine: pure domain logic.
Turns one day's raw counts into focus, productivity and burnout-risk scores.
"""
from app.domain.models.metrics import DailyMetrics

OPTIMAL_FOCUS_MINUTES = 240
MAX_HEALTHY_MINUTES = 360

TASK_WEIGHT = 40
FOCUS_WEIGHT = 40
FOCUS_FLOOR = 25  # any sustained work past the optimum keeps at least this much

# (low, high, points) checked in order, first match wins
BALANCE_BANDS = [
    (0.15, 0.25, 20),
    (0.10, 0.30, 15),
    (0.05, 0.35, 10),
]
BALANCE_FALLBACK = 5


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


class ScoreEngine:

    def apply(self, metrics: DailyMetrics) -> DailyMetrics:
        """Fills the three scores on metrics in place. Productivity must come before burnout."""
        metrics.focus_score = self.focus_score(metrics.focus_minutes)
        metrics.productivity_score = self.productivity_score(
            metrics.completion_rate, metrics.focus_minutes, metrics.break_minutes
        )
        metrics.burnout_risk_score = self.burnout_risk_score(metrics)
        return metrics

    # ──── Focus ───────────────────────────────────────────────────────────────
    def focus_score(self, focus_minutes: int) -> float:
        if focus_minutes <= OPTIMAL_FOCUS_MINUTES:
            score = focus_minutes / OPTIMAL_FOCUS_MINUTES * 100
        elif focus_minutes <= MAX_HEALTHY_MINUTES:
            excess_ratio = (focus_minutes - OPTIMAL_FOCUS_MINUTES) / (MAX_HEALTHY_MINUTES - OPTIMAL_FOCUS_MINUTES)
            score = 100 - excess_ratio * 20
        else:
            excess_hours = (focus_minutes - MAX_HEALTHY_MINUTES) / 60
            score = 80 - excess_hours * 20
        return _clamp(score)

    # ──── Productivity ────────────────────────────────────────────────────────
    def productivity_score(self, completion_rate: float, focus_minutes: int, break_minutes: int) -> float:
        total = (
            self.task_component(completion_rate)
            + self.focus_component(focus_minutes)
            + self.balance_component(focus_minutes, break_minutes)
        )
        return _clamp(total)

    def task_component(self, completion_rate: float) -> float:
        return min(TASK_WEIGHT, completion_rate * 0.4)

    def focus_component(self, focus_minutes: int) -> float:
        if focus_minutes <= 0:
            return 0.0
        if focus_minutes <= OPTIMAL_FOCUS_MINUTES:
            return focus_minutes / OPTIMAL_FOCUS_MINUTES * FOCUS_WEIGHT
        # lose 1 point per 30 min past the optimum
        return max(FOCUS_FLOOR, FOCUS_WEIGHT - (focus_minutes - OPTIMAL_FOCUS_MINUTES) / 30)

    def balance_component(self, focus_minutes: int, break_minutes: int) -> float:
        # no focus time or no recorded breaks scores 0: a 10 task, 8 done, 150 focus
        # minute day without breaks must come to a productivity score of 57
        if focus_minutes <= 0 or break_minutes <= 0:
            return 0.0
        ratio = break_minutes / focus_minutes
        for low, high, points in BALANCE_BANDS:
            if low <= ratio <= high:
                return float(points)
        return float(BALANCE_FALLBACK)

    # ──── Burnout risk ────────────────────────────────────────────────────────
    def burnout_risk_score(self, metrics: DailyMetrics) -> float:
        risk = 0.0

        # Overwork: up to 40
        if metrics.overwork_minutes > 60:
            risk += min(40, metrics.overwork_minutes / 6)

        # Late-night sessions: up to 30
        if metrics.late_night_sessions >= 2:
            risk += min(30, (metrics.late_night_sessions - 1) * 10)

        # Interruptions: up to 20
        total_sessions = metrics.total_sessions()
        if total_sessions > 0:
            interrupt_rate = metrics.interrupted_sessions / total_sessions
            if interrupt_rate > 0.5:
                risk += (interrupt_rate - 0.5) * 40

        # Low productivity: 10
        if metrics.productivity_score < 30:
            risk += 10

        # Long run of work days: up to 10
        if metrics.consecutive_work_days >= 7:
            risk += min(10, (metrics.consecutive_work_days - 6) * 2)

        return min(100.0, risk)

    @staticmethod
    def burnout_label(score: float) -> str:
        if score >= 60:
            return "HIGH"
        elif score >= 30:
            return "MEDIUM"
        return "LOW"
