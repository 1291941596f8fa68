import calendar
from typing import Optional


def get_month_name(month: int) -> str:
    """English month name for a 1-based month number."""
    return calendar.month_name[month]


def period_label(year: Optional[int], month: Optional[int]) -> str:
    if year is None or month is None:
        return "overall"
    return f"{year:04d}-{month:02d}"
