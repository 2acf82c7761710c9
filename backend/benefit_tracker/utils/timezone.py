import logging
import zoneinfo
from datetime import date, datetime

from benefit_tracker.config import settings

logger = logging.getLogger(__name__)


def get_today(tz_name: str | None = None) -> date:
    """Get today's date in the configured timezone.

    This is the only place the application reads the wall clock; everything
    below the HTTP layer receives the result as an explicit reference date.
    """
    name = settings.timezone if tz_name is None else tz_name
    if name:
        try:
            tz = zoneinfo.ZoneInfo(name)
            return datetime.now(tz).date()
        except (KeyError, ValueError, zoneinfo.ZoneInfoNotFoundError):
            logger.warning("Unknown timezone %r, falling back to local time", name)

    return date.today()
