"""
Date helpers for agreement term and termination calculations.

All dates travel through the engine as ISO 'YYYY-MM-DD' strings and are
converted to datetime.date only inside calculators.
"""

import calendar
from datetime import date, datetime, timedelta

ISO_FORMAT = "%Y-%m-%d"


def parse_date(value) -> date | None:
    """Parse an ISO date string. Empty values return None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # Accept full timestamps stored by the record layer, keep only the date part
    return datetime.strptime(str(value)[:10], ISO_FORMAT).date()


def to_iso(value: date | None) -> str | None:
    return value.strftime(ISO_FORMAT) if value else None


def month_end(value: date) -> date:
    """Snap a date forward to the last calendar day of its month."""
    last_day = calendar.monthrange(value.year, value.month)[1]
    return value.replace(day=last_day)


def month_end_after(value: date, months: int) -> date:
    """
    Last day of the month that is `months` calendar months after value's month.

    Works on (year, month) only, so a 31st never spills into the following
    month the way day-preserving month arithmetic would.
    """
    index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(index, 12)
    return month_end(date(year, month + 1, 1))


def add_days(value: date, days: int) -> date:
    return value + timedelta(days=days)
