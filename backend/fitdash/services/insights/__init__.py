"""
Insights module - AI-generated coaching insights.
"""
from fitdash.services.insights.parser import (
    InsightParseError,
    extract_text,
    parse_insights,
    split_insights,
)
from fitdash.services.insights.service import (
    INSIGHT_FALLBACK_MESSAGE,
    InsightService,
)

__all__ = [
    "InsightParseError",
    "extract_text",
    "parse_insights",
    "split_insights",
    "INSIGHT_FALLBACK_MESSAGE",
    "InsightService",
]
