from dataclasses import dataclass
from datetime import date

from benefit_tracker.utils.period_utils import get_current_period


@dataclass(frozen=True)
class MinimumSpendCycle:
    """Deadline and period boundaries of a minimum spend requirement.

    One-time requirements have a fixed deadline. Recurring ones run in
    calendar buckets or in buckets anchored to the card anniversary, and
    start over once a new period begins after ``last_reset``.
    """

    frequency: str
    reset_type: str | None = None
    deadline: date | None = None
    last_reset: date | None = None
    anniversary_date: date | None = None

    def is_one_time(self) -> bool:
        return self.frequency == "one-time"

    def is_yearly(self) -> bool:
        return self.frequency in ("yearly", "annual")

    def is_recurring(self) -> bool:
        return not self.is_one_time()

    def get_current_period(self, current_date: date) -> tuple[date, date] | None:
        if self.is_one_time():
            return None
        return get_current_period(self.frequency, self.reset_type, self.anniversary_date, current_date)

    def get_deadline(self, current_date: date) -> date | None:
        if self.is_one_time():
            return self.deadline
        return self.get_current_period(current_date)[1]

    def get_period_start_date(self, current_date: date) -> date | None:
        period = self.get_current_period(current_date)
        return period[0] if period else None

    def is_expired(self, current_date: date) -> bool:
        deadline = self.get_deadline(current_date)
        return deadline is not None and current_date > deadline

    def days_until_deadline(self, current_date: date) -> int | None:
        deadline = self.get_deadline(current_date)
        if deadline is None:
            return None
        return (deadline - current_date).days

    def deadline_within(self, current_date: date, days: int) -> bool:
        days_until = self.days_until_deadline(current_date)
        return days_until is not None and 0 < days_until <= days

    def should_reset(self, current_date: date) -> bool:
        if self.is_one_time() or self.last_reset is None:
            return False
        period_start = self.get_period_start_date(current_date)
        return period_start is not None and self.last_reset < period_start
