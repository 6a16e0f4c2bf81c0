"""
Insight Service - requests AI-generated insights for a user state.
"""
from typing import List, Optional

from fitdash.core.logging import get_logger
from fitdash.models.state import UserState
from fitdash.prompts import generate_insight_prompt
from fitdash.services.adapter import AIProviderAdapter
from fitdash.services.analytics import aggregate_metrics, calculate_streak
from fitdash.services.insights.parser import parse_insights

logger = get_logger(__name__)

INSIGHT_FALLBACK_MESSAGE = (
    "Sorry, I couldn't generate insights right now. Please try again later."
)


class InsightService:
    """
    Builds the insight prompt and delegates to the text-generation adapter.

    Any failure degrades to a single fallback message; nothing is raised.
    """

    def __init__(self, adapter: Optional[AIProviderAdapter]):
        self.adapter = adapter

    @staticmethod
    def can_generate(state: UserState) -> bool:
        """Insights need at least one workout and one nutrition record."""
        return bool(state.workouts) and bool(state.nutrition)

    def build_prompt(self, state: UserState) -> str:
        metrics = aggregate_metrics(state.workouts, state.nutrition)
        streak = calculate_streak([w.date for w in state.workouts])
        return generate_insight_prompt(state, metrics, streak)

    async def generate(self, state: UserState) -> Optional[List[str]]:
        """
        Generate a fresh list of insights.

        Returns:
            New insights (replacing the old ones), the fallback list on
            failure, or None when there is not enough data to ask
        """
        if not self.can_generate(state):
            logger.debug(
                "Skipping insight generation",
                workouts=len(state.workouts),
                nutrition=len(state.nutrition),
            )
            return None

        if self.adapter is None:
            logger.warning("No AI adapter configured, using fallback insights")
            return [INSIGHT_FALLBACK_MESSAGE]

        try:
            body = await self.adapter.generate(self.build_prompt(state))
        except Exception as e:
            logger.error("Error generating insights", error=str(e), error_type=type(e).__name__)
            return [INSIGHT_FALLBACK_MESSAGE]

        insights = parse_insights(body, INSIGHT_FALLBACK_MESSAGE)
        logger.info("Generated insights", count=len(insights))
        return insights
