"""
External Services - report export.

Services:
- ReportExportService: fitness report as PDF
"""
from fitdash.services.external.export import (
    SNAPSHOT_HANDLES,
    ReportExport,
    ReportExportService,
)

__all__ = [
    "SNAPSHOT_HANDLES",
    "ReportExport",
    "ReportExportService",
]
