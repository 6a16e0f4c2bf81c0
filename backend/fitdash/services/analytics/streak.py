"""
Workout streak calculation.
"""
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Union

DateLike = Union[date, datetime, str]

# Adjacent dates up to this many days apart still count as consecutive.
# Same-day duplicates (gap 0) neither extend nor break the streak.
STREAK_GAP_TOLERANCE_DAYS = 1.5


def _to_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def calculate_streak(dates: Iterable[DateLike], today: Optional[date] = None) -> int:
    """
    Length of the current consecutive-day streak.

    The streak only counts if the most recent date is today or yesterday;
    otherwise it is considered broken and 0 is returned.

    Args:
        dates: Activity dates, unordered, duplicates allowed
        today: Reference date, defaults to the local calendar date

    Returns:
        Number of consecutive days ending at the most recent date
    """
    sorted_dates = sorted((_to_date(d) for d in dates), reverse=True)
    if not sorted_dates:
        return 0

    today = today or date.today()
    yesterday = today - timedelta(days=1)
    if sorted_dates[0] not in (today, yesterday):
        return 0

    streak = 1
    last_date = sorted_dates[0]
    for current in sorted_dates[1:]:
        gap_days = (last_date - current).total_seconds() / 86400
        if 0 < gap_days <= STREAK_GAP_TOLERANCE_DAYS:
            streak += 1
        elif gap_days > STREAK_GAP_TOLERANCE_DAYS:
            break
        last_date = current

    return streak
