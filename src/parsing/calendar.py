"""
Calendar Arithmetic for Timer Start

Fractional week, month and year arithmetic used when resolving durations and
dates. Month and year steps clamp to the last valid day of the target month
(Jan 31 + 1 month = Feb 28/29).
"""

from datetime import date, datetime, time, timedelta

from dateutil.relativedelta import relativedelta


def start_of_day(dt: datetime) -> datetime:
    """Get the start of a day."""
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def at_time(date_part: date | datetime, hour: int, minute: int, second: int) -> datetime:
    """
    Build a datetime on the calendar date of date_part at a wall-clock time.

    The tzinfo of date_part (if it is a datetime) is carried over.

    Raises:
        ValueError: If hour, minute or second is out of range
    """
    if isinstance(date_part, datetime):
        return datetime.combine(date_part.date(), time(hour, minute, second), tzinfo=date_part.tzinfo)
    return datetime.combine(date_part, time(hour, minute, second))


def add_weeks(dt: datetime, weeks: float) -> datetime:
    """Add a (possibly fractional) number of weeks."""
    return dt + timedelta(days=7 * weeks)


def add_months(dt: datetime, months: float) -> datetime:
    """
    Add a (possibly fractional) number of months.

    Whole months are added first with day-of-month clamping. The fractional
    remainder is converted to days using the length of the month that
    follows (or precedes, for negative values) the intermediate result.

    Args:
        dt: Datetime to add to
        months: Number of months, may be fractional or negative

    Returns:
        The shifted datetime

    Raises:
        ValueError: If the result falls outside the supported year range
        OverflowError: If the day offset cannot be represented
    """
    whole_months = int(months)
    part_month = months - whole_months

    dt = dt + relativedelta(months=whole_months)

    if part_month > 0.0:
        month_in_days = ((dt + relativedelta(months=1)) - dt).days
        dt = dt + timedelta(days=round(month_in_days * part_month))
    elif part_month < 0.0:
        month_in_days = (dt - (dt - relativedelta(months=1))).days
        dt = dt + timedelta(days=round(month_in_days * part_month))

    return dt


def add_years(dt: datetime, years: float) -> datetime:
    """Add a (possibly fractional) number of years as twelve months each."""
    return add_months(dt, 12 * years)
