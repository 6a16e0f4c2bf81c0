"""
Analytics module - Derived metrics over the user's logs.

This module provides:
- Streak calculation over workout dates
- Calorie metrics aggregation
- Chart data shaping for the dashboard charts
- Dashboard view assembly
"""
from fitdash.services.analytics.charts import (
    Series,
    calorie_series,
    macro_breakdown,
    weight_trend,
    workout_frequency,
)
from fitdash.services.analytics.metrics import (
    CalorieMetrics,
    aggregate_metrics,
    goal_progress,
    latest_habit,
    round_half_up,
)
from fitdash.services.analytics.streak import calculate_streak
from fitdash.services.analytics.view import DashboardView, build_dashboard_view

__all__ = [
    # Streak
    "calculate_streak",
    # Metrics
    "CalorieMetrics",
    "aggregate_metrics",
    "goal_progress",
    "latest_habit",
    "round_half_up",
    # Charts
    "Series",
    "workout_frequency",
    "calorie_series",
    "macro_breakdown",
    "weight_trend",
    # View
    "DashboardView",
    "build_dashboard_view",
]
