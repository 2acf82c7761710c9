from dataclasses import dataclass, field
from datetime import date

from benefit_tracker.cycles import MinimumSpendCycle, derive_minimum_spend_cycle
from benefit_tracker.models.benefit import coerce_amount, new_id

MINIMUM_SPEND_FIELDS = (
    "description",
    "target_amount",
    "frequency",
    "reset_type",
    "deadline",
    "last_reset",
    "ignored",
    "ignored_end_date",
)


@dataclass
class MinimumSpend:
    """A spend threshold that can unlock one or more benefits once met."""

    description: str
    target_amount: float
    frequency: str
    id: str = field(default_factory=lambda: new_id("minspend"))
    current_amount: float = 0
    reset_type: str | None = None
    deadline: date | None = None
    last_reset: date | None = None
    is_met: bool = False
    met_date: date | None = None
    ignored: bool = False
    ignored_end_date: date | None = None
    anniversary_date: date | None = field(default=None, repr=False, compare=False)

    def set_anniversary_date(self, anniversary_date: date | None) -> None:
        self.anniversary_date = anniversary_date

    def cycle(self) -> MinimumSpendCycle:
        return derive_minimum_spend_cycle(self)

    def is_one_time(self) -> bool:
        return self.frequency == "one-time"

    def is_recurring(self) -> bool:
        return not self.is_one_time()

    def get_progress_percent(self) -> float:
        if self.target_amount <= 0:
            return 100
        return min(self.current_amount / self.target_amount * 100, 100)

    def get_remaining_amount(self) -> float:
        return max(self.target_amount - self.current_amount, 0)

    def check_is_met(self) -> bool:
        return self.current_amount >= self.target_amount

    def is_ignored_active(self, current_date: date) -> bool:
        if self.is_one_time() or self.ignored is not True or self.ignored_end_date is None:
            return False
        return self.ignored_end_date >= current_date

    def is_expired(self, current_date: date) -> bool:
        """Deadline passed without the requirement being met."""
        if self.is_met:
            return False
        return self.cycle().is_expired(current_date)

    def is_actionable(self, current_date: date) -> bool:
        return (
            not self.is_met
            and not self.is_expired(current_date)
            and not self.is_ignored_active(current_date)
        )

    def get_deadline(self, current_date: date) -> date | None:
        return self.cycle().get_deadline(current_date)

    def days_until_deadline(self, current_date: date) -> int | None:
        return self.cycle().days_until_deadline(current_date)

    def deadline_within(self, current_date: date, days: int) -> bool:
        return self.cycle().deadline_within(current_date, days)

    def should_reset(self, current_date: date) -> bool:
        return self.cycle().should_reset(current_date)

    def reset(self, current_date: date) -> None:
        self.current_amount = 0
        self.is_met = False
        self.met_date = None
        self.last_reset = current_date

    def set_current_amount(self, amount, current_date: date) -> bool:
        """Set progress and keep ``is_met`` in step with it.

        Returns True only when this update is the one that met the target.
        Dropping back below the target re-locks gated benefits.
        """
        self.current_amount = coerce_amount(amount)

        if self.current_amount >= self.target_amount and not self.is_met:
            self.is_met = True
            self.met_date = current_date
            return True

        if self.current_amount < self.target_amount and self.is_met:
            self.is_met = False
            self.met_date = None

        return False

    def add_spend(self, amount, current_date: date) -> bool:
        added = coerce_amount(amount)
        if added <= 0:
            return False
        return self.set_current_amount(self.current_amount + added, current_date)

    def update(self, changes: dict, current_date: date) -> None:
        for key, value in changes.items():
            if key in MINIMUM_SPEND_FIELDS:
                setattr(self, key, value)
        if self.is_one_time():
            self.reset_type = None
        if not self.ignored:
            self.ignored_end_date = None
        # A new target can meet or un-meet the current progress
        self.set_current_amount(self.current_amount, current_date)
