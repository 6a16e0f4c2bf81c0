"""
Shared API dependencies.
"""
from fastapi import Request

from fitdash.services.dashboard import DashboardSession


def get_session(request: Request) -> DashboardSession:
    """The dashboard session created at startup."""
    return request.app.state.session
