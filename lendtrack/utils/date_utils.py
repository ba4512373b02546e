"""Date manipulation utilities"""

from datetime import date, datetime, timedelta
from typing import List
from dateutil.relativedelta import relativedelta

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def start_of_day(value: date | datetime) -> date:
    """Drop any time component"""
    if isinstance(value, datetime):
        return value.date()
    return value


def add_weeks(from_date: date, weeks: int) -> date:
    return from_date + timedelta(weeks=weeks)


def add_months(from_date: date, months: int) -> date:
    """Add calendar months, clamping to the last day of shorter months (Jan 31 + 1 -> Feb 28/29)"""
    return from_date + relativedelta(months=months)


def month_key(value: date) -> str:
    """Analytics bucket label, e.g. date(2024, 1, 15) -> "Jan 24" """
    return f"{MONTH_NAMES[value.month - 1]} {value.year % 100:02d}"


def trailing_month_keys(as_of: date, months: int) -> List[str]:
    """Bucket labels for the last `months` calendar months ending with as_of's month, oldest first"""
    anchor = as_of.replace(day=1)
    return [month_key(anchor - relativedelta(months=i)) for i in range(months - 1, -1, -1)]
