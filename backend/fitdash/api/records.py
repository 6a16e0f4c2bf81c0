"""
Record API endpoints - workouts, nutrition, habits and body metrics.
"""
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from fitdash.api.deps import get_session
from fitdash.models.forms import BodyMetricsForm, HabitForm, NutritionForm, WorkoutForm
from fitdash.models.state import RecordKind
from fitdash.services.dashboard import DashboardSession

router = APIRouter()


async def _delete(
    session: DashboardSession,
    kind: RecordKind,
    item_id: str,
    confirm: bool,
) -> dict[str, Any]:
    if not confirm:
        raise HTTPException(status_code=409, detail="Deletion must be confirmed")

    deleted = await session.delete_item(kind, item_id, confirmed=True)
    if not deleted:
        raise HTTPException(status_code=404, detail="Record not found")

    return {"message": "Record deleted", "id": item_id}


# ========================================
# Workouts
# ========================================

@router.post("/workouts")
async def create_workout(
    request: WorkoutForm,
    session: DashboardSession = Depends(get_session),
):
    """
    Log a new workout.
    """
    record = await session.log_workout(request)
    return record.to_document()


@router.delete("/workouts/{record_id}")
async def delete_workout(
    record_id: str,
    confirm: bool = Query(False, description="Explicit delete confirmation"),
    session: DashboardSession = Depends(get_session),
):
    """
    Delete a workout. Requires confirm=true.
    """
    return await _delete(session, RecordKind.WORKOUTS, record_id, confirm)


# ========================================
# Nutrition
# ========================================

@router.post("/nutrition")
async def create_nutrition(
    request: NutritionForm,
    session: DashboardSession = Depends(get_session),
):
    """
    Log nutrition intake.
    """
    record = await session.log_nutrition(request)
    return record.to_document()


@router.delete("/nutrition/{record_id}")
async def delete_nutrition(
    record_id: str,
    confirm: bool = Query(False, description="Explicit delete confirmation"),
    session: DashboardSession = Depends(get_session),
):
    """
    Delete a nutrition record. Requires confirm=true.
    """
    return await _delete(session, RecordKind.NUTRITION, record_id, confirm)


# ========================================
# Habits and body metrics
# ========================================

@router.post("/habits")
async def create_habit(
    request: HabitForm,
    session: DashboardSession = Depends(get_session),
):
    record = await session.log_habit(request)
    return record.to_document()


@router.post("/trends")
async def create_trend_point(
    request: BodyMetricsForm,
    session: DashboardSession = Depends(get_session),
):
    """
    Record current weight and body fat.
    """
    point = await session.record_body_metrics(request)
    return point.to_document()
