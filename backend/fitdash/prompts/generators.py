"""
Prompt Generators - Functions to construct prompts from user data.
"""
from fitdash.models.state import UserState
from fitdash.prompts.templates import INSIGHT_PROMPT, RECENT_WORKOUT_COUNT
from fitdash.services.analytics.metrics import CalorieMetrics, round_half_up


def _format_number(value: float) -> str:
    # 80.0 -> "80", 80.5 -> "80.5"
    return f"{value:g}"


def generate_insight_prompt(
    state: UserState,
    metrics: CalorieMetrics,
    streak: int,
) -> str:
    """
    Generate the insight prompt for the current user state.
    """
    trend = state.latest_trend
    recent = state.workouts[-RECENT_WORKOUT_COUNT:]

    return INSIGHT_PROMPT.format(
        name=state.profile.display_name,
        goal_type=state.goals.goal_type.value,
        current_weight=_format_number(trend.weight_kg) if trend else "N/A",
        goal_weight=_format_number(state.goals.target_weight_kg),
        streak=streak,
        avg_intake=round_half_up(metrics.avg_daily_calories),
        avg_burned=round_half_up(metrics.avg_calories_burned),
        recent_workouts=", ".join(w.exercise_name for w in recent),
    )
