from fitdash.prompts.templates import (
    INSIGHT_PROMPT,
    RECENT_WORKOUT_COUNT,
)
from fitdash.prompts.generators import (
    generate_insight_prompt,
)

__all__ = [
    "INSIGHT_PROMPT",
    "RECENT_WORKOUT_COUNT",
    "generate_insight_prompt",
]
