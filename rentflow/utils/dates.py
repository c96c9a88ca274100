from datetime import date, datetime

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(value):
    """Accepts a date, datetime or ISO-ish string; returns a date or raises ValueError."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError("must be a date (YYYY-MM-DD)")
    try:
        return date_parser.isoparse(value.strip()).date()
    except (ValueError, OverflowError):
        raise ValueError("must be a date (YYYY-MM-DD)")


def month_start(day):
    return day.replace(day=1)


def last_months(count, today=None):
    """First day of each of the last `count` calendar months, oldest first."""
    current = month_start(today or date.today())
    return [current - relativedelta(months=offset) for offset in range(count - 1, -1, -1)]


def month_range(first_day):
    """[first_day, first day of next month)"""
    return first_day, first_day + relativedelta(months=1)
