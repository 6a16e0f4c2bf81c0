"""
Dashboard View - assembles render-ready data from one user state.

Orchestrates:
- Streak calculation over workout dates
- Calorie metrics and goal progress
- Chart shaping for the four dashboard charts
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from fitdash.models.state import UserState
from fitdash.services.analytics.charts import (
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


@dataclass
class KeyMetrics:
    workout_streak: int = 0
    todays_steps: int = 0
    avg_calorie_intake: int = 0
    water_intake: float = 0


@dataclass
class GoalProgress:
    label: str
    current: float
    goal: float
    unit: str
    percent: float


@dataclass
class DashboardView:
    """Everything the dashboard renders, derived from a single state."""
    profile_name: str
    goal_type: str
    key_metrics: KeyMetrics
    calories: CalorieMetrics
    goals: List[GoalProgress]
    insights: List[str]
    charts: Dict[str, List[Dict[str, Any]]]
    workout_log: List[Dict[str, Any]] = field(default_factory=list)
    nutrition_log: List[Dict[str, Any]] = field(default_factory=list)


def build_dashboard_view(state: UserState, today: Optional[date] = None) -> DashboardView:
    """
    Derive the dashboard view from a user state.

    Args:
        state: Current (reconciled) user state
        today: Reference date for the streak, defaults to the local date

    Returns:
        DashboardView with metrics, goal progress, charts and logs
    """
    calories = aggregate_metrics(state.workouts, state.nutrition)
    streak = calculate_streak([w.date for w in state.workouts], today=today)
    habit = latest_habit(state.habits)
    trend = state.latest_trend

    current_weight = trend.weight_kg if trend else 0
    current_body_fat = trend.body_fat_percent if trend else 0

    return DashboardView(
        profile_name=state.profile.display_name,
        goal_type=state.goals.goal_type.value,
        key_metrics=KeyMetrics(
            workout_streak=streak,
            todays_steps=habit.steps if habit else 0,
            avg_calorie_intake=round_half_up(calories.avg_daily_calories),
            water_intake=habit.water if habit else 0,
        ),
        calories=calories,
        goals=[
            GoalProgress(
                label="Weight",
                current=current_weight,
                goal=state.goals.target_weight_kg,
                unit="kg",
                percent=goal_progress(current_weight, state.goals.target_weight_kg),
            ),
            GoalProgress(
                label="Body Fat",
                current=current_body_fat,
                goal=state.goals.target_body_fat_percent,
                unit="%",
                percent=goal_progress(current_body_fat, state.goals.target_body_fat_percent),
            ),
        ],
        insights=list(state.insights),
        charts={
            "frequency": workout_frequency(state.workouts).to_list(),
            "calories": calorie_series(state.nutrition, state.workouts).to_list(),
            "macros": macro_breakdown(state.nutrition).to_list(),
            "weightTrend": weight_trend(state.trends, state.goals).to_list(),
        },
        # Logs are displayed newest first
        workout_log=[w.to_document() for w in reversed(state.workouts)],
        nutrition_log=[n.to_document() for n in reversed(state.nutrition)],
    )
