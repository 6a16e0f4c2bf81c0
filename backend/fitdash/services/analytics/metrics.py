"""
Metrics Aggregator - summary statistics over workout and nutrition logs.
"""
import math
from dataclasses import dataclass
from typing import Optional, Sequence

from fitdash.models.state import HabitRecord, NutritionRecord, WorkoutRecord


@dataclass(frozen=True)
class CalorieMetrics:
    """Calorie totals and averages derived from the logs."""
    total_calories_burned: float = 0
    avg_calories_burned: float = 0
    avg_daily_calories: float = 0


def aggregate_metrics(
    workouts: Sequence[WorkoutRecord],
    nutrition: Sequence[NutritionRecord],
) -> CalorieMetrics:
    """
    Compute calorie metrics from the full workout and nutrition lists.

    Averages are 0 for empty inputs.
    """
    total_burned = sum(w.calories_burned for w in workouts)
    avg_burned = total_burned / len(workouts) if workouts else 0
    avg_intake = (
        sum(n.total_calories for n in nutrition) / len(nutrition)
        if nutrition else 0
    )

    return CalorieMetrics(
        total_calories_burned=total_burned,
        avg_calories_burned=avg_burned,
        avg_daily_calories=avg_intake,
    )


def goal_progress(current: float, goal: float) -> float:
    """Percent of goal reached, capped at 100; 0 when no goal is set."""
    if goal <= 0:
        return 0
    return min(current / goal * 100, 100)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding up."""
    return math.floor(value + 0.5)


def latest_habit(habits: Sequence[HabitRecord]) -> Optional[HabitRecord]:
    return habits[-1] if habits else None
