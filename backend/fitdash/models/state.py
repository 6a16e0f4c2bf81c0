"""
User state document - the aggregate root of one user's tracked data.

Field names are snake_case in Python; each field carries the alias used in the
stored document so existing documents load unchanged. Models accept either.
"""
import datetime
import uuid
from enum import Enum
from typing import Any, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)

EMPTY_INSIGHTS_MESSAGE = "Log a workout and a meal to start getting personalized insights!"
MISSING_INSIGHTS_MESSAGE = "Log data to see insights."


def new_record_id() -> str:
    return str(uuid.uuid4())


class GoalType(str, Enum):
    """Primary fitness goal chosen at setup."""
    FAT_LOSS = "Fat Loss"
    MUSCLE_GAIN = "Muscle Gain"
    ENDURANCE = "Endurance"
    MAINTENANCE = "Maintenance"
    NOT_SET = "Not Set"


class RecordKind(str, Enum):
    """Record lists that support item deletion."""
    WORKOUTS = "workouts"
    NUTRITION = "nutrition"
    HABITS = "habits"
    TRENDS = "trends"


class _Document(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_document(self) -> dict[str, Any]:
        """Serialize using stored document field names."""
        return self.model_dump(mode="json", by_alias=True)

    @field_validator("*", mode="before")
    @classmethod
    def _blank_number_is_zero(cls, value: Any, info: ValidationInfo) -> Any:
        # Older documents stored untouched numeric form inputs as ''
        if value == "" and cls.model_fields[info.field_name].annotation in (int, float):
            return 0
        return value


class _Record(_Document):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(default_factory=new_record_id)
    date: datetime.date

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        # Older documents used millisecond timestamps as ids
        if isinstance(value, (int, float)):
            return str(int(value))
        return value


class WorkoutRecord(_Record):
    """A single logged exercise."""
    exercise_name: str = Field(alias="name")
    sets: int = Field(default=0, ge=0)
    reps: int = Field(default=0, ge=0)
    weight_kg: float = Field(default=0, ge=0, alias="weight")
    duration_minutes: float = Field(default=0, ge=0, alias="duration")
    calories_burned: float = Field(default=0, ge=0, alias="calories")


class NutritionRecord(_Record):
    """A day's logged nutrition intake."""
    total_calories: float = Field(default=0, ge=0, alias="calories")
    protein_grams: float = Field(default=0, ge=0, alias="protein")
    carb_grams: float = Field(default=0, ge=0, alias="carbs")
    fat_grams: float = Field(default=0, ge=0, alias="fats")


class HabitRecord(_Record):
    """Passively logged daily habits."""
    steps: int = Field(default=0, ge=0)
    water: float = Field(default=0, ge=0)


class TrendPoint(_Record):
    """Body measurement captured at setup or on a body metrics update."""
    weight_kg: float = Field(ge=0, alias="weight")
    body_fat_percent: float = Field(ge=0, alias="bodyFat")


class Goals(_Document):
    target_weight_kg: float = Field(default=0, ge=0, alias="weight")
    target_body_fat_percent: float = Field(default=0, ge=0, alias="bodyFat")
    goal_type: GoalType = Field(default=GoalType.NOT_SET, alias="type")


class Profile(_Document):
    display_name: str = Field(default="User", alias="name")


class UserState(_Document):
    """
    The aggregate root: one per authenticated identity.

    Record lists keep insertion order. Insights are replaced wholesale, never
    appended, and are never null.
    """
    profile: Profile = Field(default_factory=Profile)
    goals: Goals = Field(default_factory=Goals)
    workouts: List[WorkoutRecord] = Field(default_factory=list)
    nutrition: List[NutritionRecord] = Field(default_factory=list)
    habits: List[HabitRecord] = Field(default_factory=list)
    trends: List[TrendPoint] = Field(default_factory=list)
    insights: List[str] = Field(
        default_factory=lambda: [EMPTY_INSIGHTS_MESSAGE],
        alias="aiInsights",
    )

    @field_validator("insights", mode="before")
    @classmethod
    def _normalize_insights(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return list(value)
        return [value or MISSING_INSIGHTS_MESSAGE]

    @model_validator(mode="after")
    def _check_unique_ids(self) -> "UserState":
        for kind in RecordKind:
            ids = [record.id for record in getattr(self, kind.value)]
            if len(ids) != len(set(ids)):
                raise ValueError(f"duplicate record id in {kind.value}")
        return self

    @classmethod
    def empty(cls) -> "UserState":
        return cls()

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "UserState":
        return cls.model_validate(data)

    @property
    def latest_trend(self) -> Optional[TrendPoint]:
        return self.trends[-1] if self.trends else None
