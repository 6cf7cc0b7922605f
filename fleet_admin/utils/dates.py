import calendar
from datetime import date, datetime, timedelta

DATE_FORMAT = "%Y-%m-%d"


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` date; any other form raises ``ValueError``."""
    return datetime.strptime(value, DATE_FORMAT).date()


def add_one_month(start: date) -> date:
    """Same day of the following month.

    A day that does not exist in the next month rolls forward into the month
    after, e.g. 2025-01-31 -> 2025-03-03.
    """
    year = start.year + (1 if start.month == 12 else 0)
    month = 1 if start.month == 12 else start.month + 1
    days_in_month = calendar.monthrange(year, month)[1]
    if start.day <= days_in_month:
        return start.replace(year=year, month=month)
    return date(year, month, days_in_month) + timedelta(days=start.day - days_in_month)


def assignment_end_date(start_date: str, is_monthly: bool) -> str:
    start = parse_date(start_date)
    if not is_monthly:
        return start.isoformat()
    return add_one_month(start).isoformat()
