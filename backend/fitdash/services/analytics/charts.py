"""
Chart Data Shaper - reshapes raw records into chart-ready rows.

Every shaper returns a `Series`: iterating it runs the transform over the
captured inputs, so a series is lazy, finite and can be iterated again.
Labels use fixed English names regardless of the process locale.
"""
from datetime import date
from typing import Any, Callable, Dict, Iterator, List, Sequence

from fitdash.models.state import Goals, NutritionRecord, TrendPoint, WorkoutRecord

Row = Dict[str, Any]

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTH_LABELS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
MACRO_NAMES = ("Protein", "Carbs", "Fats")


class Series:
    """Restartable lazy sequence of chart rows."""

    def __init__(self, producer: Callable[..., Iterator[Row]], *args: Any):
        self._producer = producer
        self._args = args

    def __iter__(self) -> Iterator[Row]:
        return self._producer(*self._args)

    def to_list(self) -> List[Row]:
        return list(self)


def weekday_label(day: date) -> str:
    return WEEKDAY_LABELS[day.weekday()]


def month_day_label(day: date) -> str:
    """Short month and unpadded day, e.g. 'Jan 1'."""
    return f"{MONTH_LABELS[day.month - 1]} {day.day}"


def _frequency_rows(workouts: Sequence[WorkoutRecord]) -> Iterator[Row]:
    # dicts keep insertion order, so days come out in first-occurrence order
    counts: Dict[str, int] = {}
    for workout in workouts:
        day = weekday_label(workout.date)
        counts[day] = counts.get(day, 0) + 1
    for day, count in counts.items():
        yield {"day": day, "workouts": count}


def _calorie_rows(
    nutrition: Sequence[NutritionRecord],
    workouts: Sequence[WorkoutRecord],
) -> Iterator[Row]:
    for log in nutrition:
        # First workout on the same date only; other same-day workouts are not summed
        match = next((w for w in workouts if w.date == log.date), None)
        yield {
            "date": month_day_label(log.date),
            "consumed": log.total_calories,
            "burned": match.calories_burned if match else 0,
        }


def _macro_rows(nutrition: Sequence[NutritionRecord]) -> Iterator[Row]:
    latest = nutrition[-1] if nutrition else None
    values = (
        (latest.protein_grams, latest.carb_grams, latest.fat_grams)
        if latest else (0, 0, 0)
    )
    for name, value in zip(MACRO_NAMES, values):
        yield {"name": name, "value": value}


def _weight_rows(trends: Sequence[TrendPoint], goal_weight: float) -> Iterator[Row]:
    for point in trends:
        yield {
            "date": month_day_label(point.date),
            "weight": point.weight_kg,
            "goal": goal_weight,
        }


def workout_frequency(workouts: Sequence[WorkoutRecord]) -> Series:
    """Workout count per weekday, in order of first occurrence."""
    return Series(_frequency_rows, workouts)


def calorie_series(
    nutrition: Sequence[NutritionRecord],
    workouts: Sequence[WorkoutRecord],
) -> Series:
    """Consumed vs. burned calories, one row per nutrition record."""
    return Series(_calorie_rows, nutrition, workouts)


def macro_breakdown(nutrition: Sequence[NutritionRecord]) -> Series:
    """Protein/carbs/fats grams of the most recent nutrition record."""
    return Series(_macro_rows, nutrition)


def weight_trend(trends: Sequence[TrendPoint], goals: Goals) -> Series:
    """Weight per trend point against the current goal weight."""
    return Series(_weight_rows, trends, goals.target_weight_kg)
