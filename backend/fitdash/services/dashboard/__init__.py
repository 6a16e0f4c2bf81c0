"""
Dashboard module - per-user session state and actions.
"""
from fitdash.services.dashboard.session import (
    DashboardSession,
    SessionNotReadyError,
    SessionStatus,
    SetupNotAllowedError,
    reconcile,
)

__all__ = [
    "DashboardSession",
    "SessionNotReadyError",
    "SessionStatus",
    "SetupNotAllowedError",
    "reconcile",
]
