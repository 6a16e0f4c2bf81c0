"""
Input forms for user actions.
"""
import datetime
from typing import Optional

from pydantic import BaseModel, Field

from fitdash.models.state import GoalType


class SetupForm(BaseModel):
    """First-run profile setup."""
    name: str = Field(..., min_length=1, description="Display name")
    goal_type: GoalType = GoalType.FAT_LOSS
    current_weight: float = Field(..., ge=0)
    goal_weight: float = Field(..., ge=0)
    current_body_fat: float = Field(..., ge=0)
    goal_body_fat: float = Field(..., ge=0)


class WorkoutForm(BaseModel):
    date: datetime.date = Field(default_factory=datetime.date.today)
    exercise_name: str = Field(..., min_length=1)
    sets: int = Field(default=0, ge=0)
    reps: int = Field(default=0, ge=0)
    weight_kg: float = Field(default=0, ge=0)
    duration_minutes: float = Field(default=0, ge=0)
    calories_burned: float = Field(default=0, ge=0)


class NutritionForm(BaseModel):
    date: datetime.date = Field(default_factory=datetime.date.today)
    total_calories: float = Field(default=0, ge=0)
    protein_grams: float = Field(default=0, ge=0)
    carb_grams: float = Field(default=0, ge=0)
    fat_grams: float = Field(default=0, ge=0)


class HabitForm(BaseModel):
    date: datetime.date = Field(default_factory=datetime.date.today)
    steps: int = Field(default=0, ge=0)
    water: float = Field(default=0, ge=0)


class BodyMetricsForm(BaseModel):
    """Body measurement update, appended to the weight trend."""
    date: Optional[datetime.date] = None
    weight_kg: float = Field(..., ge=0)
    body_fat_percent: float = Field(..., ge=0)
