"""
Dashboard API endpoints.
"""
from dataclasses import asdict
from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from fitdash.api.deps import get_session
from fitdash.models.forms import SetupForm
from fitdash.services.dashboard import DashboardSession, SessionStatus

router = APIRouter()


class DashboardResponse(BaseModel):
    """Session status and, once loaded, the render-ready view."""
    status: SessionStatus
    view: Optional[dict[str, Any]] = None
    error: Optional[str] = None


def _response(session: DashboardSession) -> DashboardResponse:
    if session.status == SessionStatus.LOADING:
        return DashboardResponse(status=session.status)
    if session.status == SessionStatus.ERROR:
        return DashboardResponse(status=session.status, error=session.error)
    return DashboardResponse(status=session.status, view=asdict(session.view()))


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(session: DashboardSession = Depends(get_session)):
    """
    Get derived metrics, charts and logs for the current user.
    """
    return _response(session)


@router.post("/setup", response_model=DashboardResponse)
async def complete_setup(
    request: SetupForm,
    session: DashboardSession = Depends(get_session),
):
    """
    Create the user's profile, goals and first weight trend point.

    Only allowed for a user without stored data (409 otherwise).
    """
    await session.complete_setup(request)
    return _response(session)
