"""
Insights API endpoints.
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from fitdash.api.deps import get_session
from fitdash.core.logging import get_logger
from fitdash.services.dashboard import DashboardSession

logger = get_logger(__name__)
router = APIRouter()


class InsightsResponse(BaseModel):
    insights: list[str]


@router.post("/insights", response_model=InsightsResponse)
async def generate_insights(session: DashboardSession = Depends(get_session)):
    """
    Generate new AI insights for the current data.

    Returns the current insights unchanged when there is no workout or
    nutrition record yet.
    """
    logger.info("Generating insights")
    insights = await session.generate_insights()
    return InsightsResponse(insights=insights)
