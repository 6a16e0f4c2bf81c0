"""
Insight Parser - turns a text-generation response into insight strings.

Grammar: the response text is split on LF or CRLF line breaks only, and
blank lines are dropped. Any response that does not carry text at
`candidates[0].content.parts[0].text` is a parse failure.
"""
import re
from typing import Any, List

from fitdash.core.logging import get_logger

logger = get_logger(__name__)

LINE_BREAK = re.compile(r"\r?\n")


class InsightParseError(ValueError):
    """Response body does not have the expected shape."""


def extract_text(body: Any) -> str:
    """
    Extract the generated text from a response body.

    Raises:
        InsightParseError: missing key, wrong type or empty candidate list
    """
    try:
        text = body["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise InsightParseError(f"Unexpected response shape: {e!r}") from e

    if not isinstance(text, str):
        raise InsightParseError("Response text is not a string")
    return text


def split_insights(text: str) -> List[str]:
    """Split text into insights, one per non-blank line."""
    return [line for line in LINE_BREAK.split(text) if line.strip()]


def parse_insights(body: Any, fallback: str) -> List[str]:
    """
    Parse a response body into insights.

    Returns:
        Insight strings, or `[fallback]` when the body cannot be parsed
    """
    try:
        return split_insights(extract_text(body))
    except InsightParseError as e:
        logger.warning("Failed to parse insights", error=str(e))
        return [fallback]
