from datetime import date, timedelta

from dateutil.relativedelta import relativedelta


PERIOD_MONTHS = {
    "monthly": 1,
    "quarterly": 3,
    "biannual": 6,
    "annual": 12,
    "yearly": 12,
}


def get_current_period(
    frequency: str,
    reset_type: str | None,
    anniversary_date: date | None,
    reference_date: date,
) -> tuple[date, date]:
    """Return (period_start, period_end) for the period containing reference_date.

    For calendar resets, periods align to calendar boundaries.
    For anniversary resets, periods align to the card's anniversary; only its
    month and day matter.
    """
    if reset_type == "anniversary" and anniversary_date:
        return anniversary_period(frequency, anniversary_date, reference_date)
    return calendar_period(frequency, reference_date)


def next_period_start(
    frequency: str,
    reset_type: str | None,
    anniversary_date: date | None,
    after: date,
) -> date:
    """First period boundary strictly after ``after``."""
    _, end = get_current_period(frequency, reset_type, anniversary_date, after)
    return end + timedelta(days=1)


def calendar_period(frequency: str, ref: date) -> tuple[date, date]:
    if frequency == "monthly":
        start = ref.replace(day=1)
        end = start + relativedelta(months=1) - relativedelta(days=1)
    elif frequency == "quarterly":
        quarter_month = ((ref.month - 1) // 3) * 3 + 1
        start = date(ref.year, quarter_month, 1)
        end = start + relativedelta(months=3) - relativedelta(days=1)
    elif frequency == "biannual":
        half_month = 1 if ref.month <= 6 else 7
        start = date(ref.year, half_month, 1)
        end = start + relativedelta(months=6) - relativedelta(days=1)
    else:  # annual / yearly
        start = date(ref.year, 1, 1)
        end = date(ref.year, 12, 31)
    return start, end


def anniversary_period(frequency: str, anniversary: date, ref: date) -> tuple[date, date]:
    months = PERIOD_MONTHS.get(frequency, 12)

    # Every boundary is computed from the anniversary itself rather than from
    # the previous boundary, so a day-31 anniversary clamps to Feb 28/29 and
    # returns to the 31st in March instead of drifting to the 28th.
    offset = (ref.year - 1 - anniversary.year) * 12
    cursor = anniversary + relativedelta(months=offset)
    step = 1
    while True:
        next_cursor = anniversary + relativedelta(months=offset + step * months)
        if next_cursor > ref:
            # ref is in the period [cursor, next_cursor - 1 day]
            return cursor, next_cursor - timedelta(days=1)
        cursor = next_cursor
        step += 1


def anniversary_in_year(anniversary: date, year: int) -> date:
    """The anniversary's month/day in ``year``, Feb 29 clamped to Feb 28."""
    return anniversary + relativedelta(years=year - anniversary.year)
