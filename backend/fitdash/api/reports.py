"""
Report API endpoints.
"""
import base64
import binascii
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from fitdash.api.deps import get_session
from fitdash.core.logging import get_logger
from fitdash.services.dashboard import DashboardSession

logger = get_logger(__name__)
router = APIRouter()


class ReportRequest(BaseModel):
    """Rendered chart cards to embed in the report."""
    snapshots: dict[str, str] = Field(
        default_factory=dict,
        description="Base64 PNG images keyed by chart handle",
    )


@router.post("/reports")
async def export_report(
    request: ReportRequest,
    session: DashboardSession = Depends(get_session),
):
    """
    Download the fitness report as PDF.
    """
    try:
        snapshots = {
            handle: base64.b64decode(data, validate=True)
            for handle, data in request.snapshots.items()
        }
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=422, detail="Snapshots must be base64 encoded")

    export = session.export_report(snapshots)
    if not export.ok:
        return JSONResponse(status_code=503, content={"alert": export.alert})

    return Response(
        content=export.content,
        media_type=session.exporter.media_type,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(export.filename)}"},
    )
