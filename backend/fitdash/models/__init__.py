from fitdash.models.document import UserDocument
from fitdash.models.state import (
    EMPTY_INSIGHTS_MESSAGE,
    Goals,
    GoalType,
    HabitRecord,
    NutritionRecord,
    Profile,
    RecordKind,
    TrendPoint,
    UserState,
    WorkoutRecord,
)

__all__ = [
    "UserDocument",
    "EMPTY_INSIGHTS_MESSAGE",
    "Goals",
    "GoalType",
    "HabitRecord",
    "NutritionRecord",
    "Profile",
    "RecordKind",
    "TrendPoint",
    "UserState",
    "WorkoutRecord",
]
