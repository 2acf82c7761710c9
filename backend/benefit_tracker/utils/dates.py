"""Date helpers shared by the cycle calculators and the record layer.

Everything inside the engine is a plain ``datetime.date``: a local-midnight
boundary with no time or timezone attached. Conversion happens only here.
"""
from datetime import date, datetime

from dateutil import parser as date_parser


def to_date(value: date | datetime | str | None) -> date | None:
    """Normalize a date, datetime or ISO-8601 string to a local calendar date.

    Offset-aware values (``...Z``, ``+02:00``) are converted to local time
    first so a stored local midnight never shifts by a day.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    if isinstance(value, date):
        return value
    return to_date(date_parser.isoparse(value))


def to_iso(value: date | None) -> str | None:
    if value is None:
        return None
    return datetime(value.year, value.month, value.day).isoformat()




def to_anniversary_date(value: date | datetime | str | None) -> date | None:
    """Calendar date of a card anniversary.

    Browsers store a picked date as UTC midnight (``2023-03-10T00:00:00.000Z``).
    Offset-aware values keep the calendar date they were written with, so the
    anniversary does not move a day back in zones west of UTC.
    """
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = date_parser.isoparse(value)
    if isinstance(value, datetime):
        return value.date()
    return value
