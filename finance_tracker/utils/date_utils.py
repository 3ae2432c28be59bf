"""Date manipulation utilities"""

from datetime import date
from typing import List, Tuple
from dateutil.relativedelta import relativedelta

MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def month_start(day: date) -> date:
    """First day of the month containing `day`"""
    return day.replace(day=1)


def month_end(day: date) -> date:
    """Last day of the month containing `day`"""
    return month_start(day) + relativedelta(months=1, days=-1)


def add_months(day: date, months: int) -> date:
    """Shift by calendar months, clamping to the last valid day (Jan 31 + 1 -> Feb 28/29)"""
    return day + relativedelta(months=months)


def in_month(day: date, year: int, month: int) -> bool:
    return day.year == year and day.month == month


def trailing_months(as_of: date, count: int) -> List[Tuple[int, int]]:
    """(year, month) pairs for the `count` months ending with as_of's month, oldest first"""
    first = month_start(as_of)
    months = []
    for i in range(count - 1, -1, -1):
        shifted = first - relativedelta(months=i)
        months.append((shifted.year, shifted.month))
    return months


def month_key(day: date) -> str:
    """YYYY-MM bucket used for the stored `month` column"""
    return f"{day.year:04d}-{day.month:02d}"


def month_label(month: int) -> str:
    """Short English month name, independent of the process locale"""
    return MONTH_ABBREVIATIONS[month - 1]
