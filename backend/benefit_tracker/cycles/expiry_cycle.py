from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, timedelta

from benefit_tracker.utils.period_utils import anniversary_in_year, next_period_start

RECURRING_FREQUENCIES = ("monthly", "quarterly", "biannual", "annual", "every-4-years")


@dataclass(frozen=True)
class ExpiryCycle:
    """Reset schedule of a recurring benefit.

    A pure value: it is rebuilt from the benefit's stored fields for every
    query and holds nothing that can go stale.
    """

    frequency: str
    reset_type: str | None = None
    last_reset: date | None = None
    anniversary_date: date | None = None

    def is_one_time(self) -> bool:
        return self.frequency == "one-time"

    def is_carryover(self) -> bool:
        return self.frequency == "carryover"

    def is_recurring(self) -> bool:
        return self.frequency in RECURRING_FREQUENCIES

    def is_expired(self, current_date: date) -> bool:
        """True once the next reset date is on or before current_date."""
        next_reset = self.calculate_next_reset_date(current_date)
        return next_reset is not None and next_reset <= current_date

    def calculate_next_reset_date(self, reference_date: date | None = None) -> date | None:
        """First period boundary strictly after last_reset.

        The result depends only on last_reset: it stays the same for every
        reference date until the benefit is reset, and a reference date on or
        after it means the current period is overdue.
        """
        if self.last_reset is None or not self.is_recurring():
            return None
        return self._boundary_after(self.last_reset)

    def iter_reset_dates(self, until: date) -> Iterator[date]:
        """Yield every boundary passed since last_reset, up to and including ``until``."""
        if self.last_reset is None or not self.is_recurring():
            return
        boundary = self._boundary_after(self.last_reset)
        while boundary <= until:
            yield boundary
            boundary = self._boundary_after(boundary)

    def missed_periods(self, reference_date: date) -> int:
        return sum(1 for _ in self.iter_reset_dates(reference_date))

    def current_period_start(self, reference_date: date) -> date | None:
        """Start of the period containing reference_date, catching up over skipped periods."""
        start = self.last_reset
        for boundary in self.iter_reset_dates(reference_date):
            start = boundary
        return start

    def _boundary_after(self, after: date) -> date:
        anniversary = self.anniversary_date if self.reset_type == "anniversary" else None
        if self.frequency == "every-4-years":
            if anniversary:
                boundary = anniversary_in_year(anniversary, after.year)
                while boundary <= after:
                    boundary = anniversary_in_year(anniversary, boundary.year + 4)
                return boundary
            return date(after.year + 4, 1, 1)
        return next_period_start(self.frequency, self.reset_type, anniversary, after)

    def days_until_reset(self, current_date: date) -> int | None:
        next_reset = self.calculate_next_reset_date(current_date)
        if next_reset is None:
            return None
        return (next_reset - current_date).days

    def expires_within(self, current_date: date, days: int) -> bool:
        days_until = self.days_until_reset(current_date)
        return days_until is not None and 0 < days_until <= days

    def get_deadline(self, current_date: date, deadline: date | None = None) -> date | None:
        """Last day of the current period (the day before the next reset).

        For one-time cycles this is the explicit ``deadline`` passed in.
        """
        if self.is_one_time():
            return deadline
        next_reset = self.calculate_next_reset_date(current_date)
        if next_reset is None:
            return None
        return next_reset - timedelta(days=1)

    def days_until_deadline(self, current_date: date, deadline: date | None = None) -> int | None:
        dl = self.get_deadline(current_date, deadline)
        if dl is None:
            return None
        return (dl - current_date).days

    def deadline_within(self, current_date: date, days: int, deadline: date | None = None) -> bool:
        days_until = self.days_until_deadline(current_date, deadline)
        return days_until is not None and 0 < days_until <= days

    def is_deadline_passed(self, current_date: date, deadline: date | None = None) -> bool:
        dl = self.get_deadline(current_date, deadline)
        return dl is not None and current_date > dl


@dataclass(frozen=True)
class OneTimeCycle:
    """A benefit that never resets; it may carry a use-by date."""

    expiry_date: date | None = None

    def is_recurring(self) -> bool:
        return False

    def is_expired(self, current_date: date) -> bool:
        return False

    def calculate_next_reset_date(self, reference_date: date | None = None) -> date | None:
        return None

    def expires_within(self, current_date: date, days: int) -> bool:
        return False

    def get_deadline(self, current_date: date) -> date | None:
        return self.expiry_date

    def days_until_deadline(self, current_date: date) -> int | None:
        if self.expiry_date is None:
            return None
        return (self.expiry_date - current_date).days

    def deadline_within(self, current_date: date, days: int) -> bool:
        days_until = self.days_until_deadline(current_date)
        return days_until is not None and 0 < days_until <= days

    def is_deadline_passed(self, current_date: date) -> bool:
        return self.expiry_date is not None and current_date > self.expiry_date
