from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, NamedTuple


class ExpiringInstance(NamedTuple):
    instance: Any
    expiry_date: date


@dataclass(frozen=True)
class CarryoverCycle:
    """Earned instances of a carryover benefit.

    One instance can be earned per calendar year. An instance earned in year X
    stays usable through Dec 31 of year X+1, independent of the card
    anniversary. Expired instances stay in the list; they only drop out of
    the active queries.
    """

    earned_instances: list = field(default_factory=list)

    @staticmethod
    def calculate_expiry_date(earned_date: date) -> date:
        return date(earned_date.year + 1, 12, 31)

    @staticmethod
    def get_earn_year(earned_date: date) -> int:
        return earned_date.year

    @staticmethod
    def get_reset_date(current_date: date) -> date:
        """Jan 1 of the current year, when yearly earn progress starts over."""
        return date(current_date.year, 1, 1)

    def is_recurring(self) -> bool:
        return False

    def is_expired(self, current_date: date) -> bool:
        return False

    def calculate_next_reset_date(self, reference_date: date | None = None) -> date | None:
        return None

    def is_instance_active(self, instance, current_date: date) -> bool:
        if instance is None or instance.earned_date is None:
            return False
        return current_date <= self.calculate_expiry_date(instance.earned_date)

    def get_active_instances(self, current_date: date) -> list:
        return [i for i in self.earned_instances if self.is_instance_active(i, current_date)]

    def has_active_instances(self, current_date: date) -> bool:
        return len(self.get_active_instances(current_date)) > 0

    def get_total_remaining(self, per_instance_total: float, current_date: date) -> float:
        return sum(
            max(0, per_instance_total - (instance.used_amount or 0))
            for instance in self.get_active_instances(current_date)
        )

    def can_earn_this_year(self, current_date: date) -> bool:
        return not any(
            i.earned_date is not None and self.get_earn_year(i.earned_date) == current_date.year
            for i in self.earned_instances
        )

    def get_earn_deadline(self, current_date: date) -> date:
        return date(current_date.year, 12, 31)

    def get_earliest_expiry_date(self, current_date: date) -> date | None:
        active = self.get_active_instances(current_date)
        if not active:
            return None
        return min(self.calculate_expiry_date(i.earned_date) for i in active)

    def get_deadline(self, current_date: date) -> date | None:
        return self.get_earliest_expiry_date(current_date)

    def days_until_earliest_expiry(self, current_date: date) -> int | None:
        earliest = self.get_earliest_expiry_date(current_date)
        if earliest is None:
            return None
        return (earliest - current_date).days

    def get_expiring_instances(self, current_date: date, days: int) -> list[ExpiringInstance]:
        """Active instances whose expiry is after current_date and within ``days``."""
        limit = current_date + timedelta(days=days)
        expiring = []
        for instance in self.get_active_instances(current_date):
            expiry = self.calculate_expiry_date(instance.earned_date)
            if current_date < expiry <= limit:
                expiring.append(ExpiringInstance(instance, expiry))
        return expiring

    def has_expiring_within(self, current_date: date, days: int) -> bool:
        return len(self.get_expiring_instances(current_date, days)) > 0

    def expires_within(self, current_date: date, days: int) -> bool:
        return self.has_expiring_within(current_date, days)
