"""
Export Service - Export the user's fitness report.

Currently supports:
- PDF (reportlab) with summary, chart snapshots and full logs
"""
from dataclasses import dataclass
from datetime import date
from io import BytesIO
from typing import Any, List, Mapping, Optional
from xml.sax.saxutils import escape

try:
    from reportlab.lib import colors
    from reportlab.lib.pagesizes import A4
    from reportlab.lib.styles import getSampleStyleSheet
    from reportlab.lib.units import mm
    from reportlab.lib.utils import ImageReader
    from reportlab.platypus import (
        SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle,
        PageBreak, Image,
    )
    HAS_REPORTLAB = True
except ImportError:
    HAS_REPORTLAB = False

from fitdash.core.logging import get_logger
from fitdash.models.state import UserState

logger = get_logger(__name__)

LIBRARY_MISSING_ALERT = "PDF generation libraries are not loaded. Please try again later."
EXPORT_FAILED_ALERT = "Could not generate the report. Please try again later."

# Opaque handles of the rendered dashboard cards, in report order
CALORIES_CHART = "calories-chart-card"
WEIGHT_TREND_CHART = "weight-trend-card"
FREQUENCY_CHART = "frequency-chart-card"
MACRO_CHART = "macro-chart-card"
SNAPSHOT_HANDLES = (CALORIES_CHART, WEIGHT_TREND_CHART, FREQUENCY_CHART, MACRO_CHART)

SUMMARY_HEADER = [
    "Goal Type", "Current Weight (kg)", "Goal Weight (kg)",
    "Current Body Fat (%)", "Goal Body Fat (%)",
]
WORKOUT_HEADER = [
    "Date", "Exercise", "Sets", "Reps", "Weight (kg)", "Duration (min)", "Calories",
]
NUTRITION_HEADER = ["Date", "Calories", "Protein (g)", "Carbs (g)", "Fats (g)"]

PAGE_MARGIN = 10 * mm if HAS_REPORTLAB else 0


@dataclass
class ReportExport:
    """Outcome of a report export: a file, or an alert for the user."""
    filename: str
    content: Optional[bytes] = None
    alert: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.content is not None


def _fmt(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


class ReportExportService:
    """
    Service for exporting the fitness report.
    """

    media_type = "application/pdf"

    def get_filename(self, display_name: str) -> str:
        """Generate filename for the report download."""
        return f"Fitness_Report_{display_name.replace(' ', '_')}.pdf"

    def export_pdf(
        self,
        state: UserState,
        snapshots: Mapping[str, bytes],
        generated_on: Optional[date] = None,
    ) -> ReportExport:
        """
        Export the report to PDF.

        Args:
            state: Current user state
            snapshots: PNG bytes of rendered chart cards keyed by handle;
                missing handles are skipped
            generated_on: Date printed on the title page, defaults to today

        Returns:
            ReportExport with the PDF content, or with an alert and no
            content when the PDF could not be produced
        """
        filename = self.get_filename(state.profile.display_name)

        if not HAS_REPORTLAB:
            logger.error("reportlab not installed, cannot export report")
            return ReportExport(filename=filename, alert=LIBRARY_MISSING_ALERT)

        try:
            content = self._render(state, snapshots, generated_on or date.today())
        except Exception as e:
            logger.error("Report export failed", error=str(e), error_type=type(e).__name__)
            return ReportExport(filename=filename, alert=EXPORT_FAILED_ALERT)

        logger.info(
            "Exported report to PDF",
            filename=filename,
            workouts=len(state.workouts),
            nutrition=len(state.nutrition),
            snapshots=sum(1 for h in SNAPSHOT_HANDLES if snapshots.get(h)),
            size_bytes=len(content),
        )
        return ReportExport(filename=filename, content=content)

    def _render(
        self,
        state: UserState,
        snapshots: Mapping[str, bytes],
        generated_on: date,
    ) -> bytes:
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=PAGE_MARGIN,
            leftMargin=PAGE_MARGIN,
            topMargin=PAGE_MARGIN,
            bottomMargin=PAGE_MARGIN,
            title=f"Fitness Report for {state.profile.display_name}",
        )
        styles = getSampleStyleSheet()

        story: List[Any] = []

        # Title page
        story.append(Paragraph(
            f"Fitness Report for {escape(state.profile.display_name)}",
            styles["Title"],
        ))
        story.append(Paragraph(
            f"Report Generated: {generated_on.isoformat()}",
            styles["Normal"],
        ))
        story.append(Spacer(1, 12))
        story.append(self._table([SUMMARY_HEADER, self._summary_row(state)]))

        # Visual analytics
        story.append(PageBreak())
        story.append(Paragraph("Visual Analytics", styles["Heading2"]))
        story.extend(self._snapshots(doc, snapshots, (CALORIES_CHART, WEIGHT_TREND_CHART)))
        story.append(PageBreak())
        story.extend(self._snapshots(doc, snapshots, (FREQUENCY_CHART, MACRO_CHART)))

        # Data tables
        story.append(PageBreak())
        story.append(Paragraph("Workout Log", styles["Heading2"]))
        story.append(self._table([WORKOUT_HEADER] + [
            [
                w.date.isoformat(), w.exercise_name, _fmt(w.sets), _fmt(w.reps),
                _fmt(w.weight_kg), _fmt(w.duration_minutes), _fmt(w.calories_burned),
            ]
            for w in state.workouts
        ]))

        story.append(PageBreak())
        story.append(Paragraph("Nutrition Log", styles["Heading2"]))
        story.append(self._table([NUTRITION_HEADER] + [
            [
                n.date.isoformat(), _fmt(n.total_calories), _fmt(n.protein_grams),
                _fmt(n.carb_grams), _fmt(n.fat_grams),
            ]
            for n in state.nutrition
        ]))

        doc.build(story)

        pdf_content = buffer.getvalue()
        buffer.close()
        return pdf_content

    def _summary_row(self, state: UserState) -> List[str]:
        trend = state.latest_trend
        return [
            state.goals.goal_type.value,
            _fmt(trend.weight_kg) if trend else "N/A",
            _fmt(state.goals.target_weight_kg),
            _fmt(trend.body_fat_percent) if trend else "N/A",
            _fmt(state.goals.target_body_fat_percent),
        ]

    def _snapshots(self, doc, snapshots: Mapping[str, bytes], handles) -> List[Any]:
        """Scale each available snapshot to the frame width, two per page."""
        elements: List[Any] = []
        max_height = doc.height / 2 - 12

        for handle in handles:
            data = snapshots.get(handle)
            if not data:
                continue

            img_width, img_height = ImageReader(BytesIO(data)).getSize()
            width = doc.width
            height = img_height * width / img_width
            if height > max_height:
                width = width * max_height / height
                height = max_height

            elements.append(Image(BytesIO(data), width=width, height=height))
            elements.append(Spacer(1, 10))

        return elements

    def _table(self, rows: List[List[str]]) -> "Table":
        table = Table(rows, repeatRows=1)
        table.setStyle(TableStyle([
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 9),
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#2c3e50')),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
            ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
            ('TOPPADDING', (0, 0), (-1, -1), 4),
        ]))
        return table
