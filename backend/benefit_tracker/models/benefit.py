import math
import uuid
from dataclasses import dataclass, field, replace
from datetime import date

from benefit_tracker.cycles import (
    BenefitCycle,
    CarryoverCycle,
    ExpiringInstance,
    ExpiryCycle,
    derive_benefit_cycle,
)

JUSTIFICATION_FIELDS = ("amount", "justification", "reminder_date", "charge_date", "confirmed")

BENEFIT_FIELDS = (
    "description",
    "total_amount",
    "used_amount",
    "frequency",
    "reset_type",
    "last_reset",
    "auto_claim",
    "auto_claim_end_date",
    "ignored",
    "ignored_end_date",
    "expiry_date",
    "is_carryover",
    "required_minimum_spend_id",
)


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:9]}"


def coerce_amount(value, upper: float | None = None) -> float:
    """Clamp user-entered amounts instead of rejecting them; NaN and negatives become 0."""
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(amount) or amount < 0:
        amount = 0
    if upper is not None and amount > upper:
        amount = upper
    return amount


@dataclass
class UsageJustification:
    amount: float
    justification: str
    reminder_date: date | None = None
    charge_date: date | None = None
    confirmed: bool = False
    id: str = field(default_factory=lambda: new_id("just"))

    def is_reminder_due(self, current_date: date) -> bool:
        return self.reminder_date is not None and not self.confirmed and self.reminder_date <= current_date


@dataclass
class EarnedInstance:
    earned_date: date
    used_amount: float = 0
    usage_justifications: list[UsageJustification] = field(default_factory=list)


@dataclass(frozen=True)
class ClaimPolicy:
    auto_claim: bool = False
    auto_claim_end_date: date | None = None
    ignored: bool = False
    ignored_end_date: date | None = None


def resolve_claim_policy(policy: ClaimPolicy, changed: str | None = None) -> ClaimPolicy:
    """Return ``policy`` with auto-claim and ignore made mutually exclusive.

    ``changed`` names the flag the caller just turned on ("auto_claim" or
    "ignored"); it wins over the other one. Without it auto-claim wins.
    A cleared flag loses its end date.
    """
    if policy.auto_claim and policy.ignored:
        if changed == "ignored":
            policy = replace(policy, auto_claim=False)
        else:
            policy = replace(policy, ignored=False)
    if not policy.auto_claim:
        policy = replace(policy, auto_claim_end_date=None)
    if not policy.ignored:
        policy = replace(policy, ignored_end_date=None)
    return policy


@dataclass
class Benefit:
    """A credit on a card: recurring, one-time or carryover.

    The reset schedule is never stored on the benefit; ``cycle()`` derives it
    from the current fields each time it is asked.
    """

    description: str
    total_amount: float
    frequency: str
    id: str = field(default_factory=lambda: new_id("benefit"))
    used_amount: float = 0
    reset_type: str | None = None
    last_reset: date | None = None
    auto_claim: bool = False
    auto_claim_end_date: date | None = None
    ignored: bool = False
    ignored_end_date: date | None = None
    expiry_date: date | None = None
    is_carryover: bool = False
    earned_instances: list[EarnedInstance] = field(default_factory=list)
    required_minimum_spend_id: str | None = None
    usage_justifications: list[UsageJustification] = field(default_factory=list)
    # Owned by the parent card, not serialized with the benefit
    anniversary_date: date | None = field(default=None, repr=False, compare=False)

    def set_anniversary_date(self, anniversary_date: date | None) -> None:
        self.anniversary_date = anniversary_date

    def cycle(self) -> BenefitCycle:
        return derive_benefit_cycle(self)

    # ==================== STATUS ====================

    def is_one_time(self) -> bool:
        return self.frequency == "one-time"

    def is_carryover_benefit(self) -> bool:
        return isinstance(self.cycle(), CarryoverCycle)

    def is_recurring(self) -> bool:
        cycle = self.cycle()
        return isinstance(cycle, ExpiryCycle) and cycle.is_recurring()

    def is_auto_claim_active(self, current_date: date) -> bool:
        if self.is_one_time() or self.auto_claim is not True or self.auto_claim_end_date is None:
            return False
        return self.auto_claim_end_date >= current_date

    def is_ignored_active(self, current_date: date) -> bool:
        if self.is_one_time() or self.ignored is not True or self.ignored_end_date is None:
            return False
        return self.ignored_end_date >= current_date

    def claim_policy(self) -> ClaimPolicy:
        return ClaimPolicy(
            auto_claim=self.auto_claim,
            auto_claim_end_date=self.auto_claim_end_date,
            ignored=self.ignored,
            ignored_end_date=self.ignored_end_date,
        )

    def has_required_minimum_spend(self) -> bool:
        return self.required_minimum_spend_id is not None

    def set_required_minimum_spend_id(self, minimum_spend_id: str | None) -> None:
        self.required_minimum_spend_id = minimum_spend_id or None

    def get_remaining_amount(self) -> float:
        return self.total_amount - self.used_amount

    def is_fully_used(self, current_date: date) -> bool:
        if self.is_carryover_benefit():
            return self.get_total_carryover_remaining(current_date) <= 0
        return self.get_remaining_amount() <= 0

    # ==================== CYCLE QUERIES ====================

    def get_next_reset_date(self, current_date: date) -> date | None:
        return self.cycle().calculate_next_reset_date(current_date)

    def needs_reset(self, current_date: date) -> bool:
        return self.cycle().is_expired(current_date)

    def expires_within(self, current_date: date, days: int) -> bool:
        cycle = self.cycle()
        if isinstance(cycle, (ExpiryCycle, CarryoverCycle)):
            return cycle.expires_within(current_date, days)
        return False

    def get_deadline(self, current_date: date) -> date | None:
        return self.cycle().get_deadline(current_date)

    def days_until_reset(self, current_date: date) -> int | None:
        cycle = self.cycle()
        if isinstance(cycle, ExpiryCycle):
            return cycle.days_until_reset(current_date)
        return None

    # ==================== CARRYOVER ====================

    def _carryover_cycle(self) -> CarryoverCycle | None:
        cycle = self.cycle()
        return cycle if isinstance(cycle, CarryoverCycle) else None

    def get_active_carryover_instances(self, current_date: date) -> list[EarnedInstance]:
        cycle = self._carryover_cycle()
        return cycle.get_active_instances(current_date) if cycle else []

    def has_active_carryover_instances(self, current_date: date) -> bool:
        cycle = self._carryover_cycle()
        return cycle.has_active_instances(current_date) if cycle else False

    def get_total_carryover_remaining(self, current_date: date) -> float:
        cycle = self._carryover_cycle()
        return cycle.get_total_remaining(self.total_amount, current_date) if cycle else 0

    def can_earn_carryover_this_year(self, current_date: date) -> bool:
        cycle = self._carryover_cycle()
        return cycle.can_earn_this_year(current_date) if cycle else False

    def get_carryover_expiry_date(self, current_date: date) -> date | None:
        cycle = self._carryover_cycle()
        return cycle.get_earliest_expiry_date(current_date) if cycle else None

    def get_carryover_earn_deadline(self, current_date: date) -> date | None:
        cycle = self._carryover_cycle()
        return cycle.get_earn_deadline(current_date) if cycle else None

    def get_expiring_carryover_instances(self, current_date: date, days: int) -> list[ExpiringInstance]:
        cycle = self._carryover_cycle()
        return cycle.get_expiring_instances(current_date, days) if cycle else []

    def earn_carryover_instance(self, current_date: date) -> EarnedInstance | None:
        """Record this year's earn. Returns None if not carryover or already earned this year."""
        if not self.can_earn_carryover_this_year(current_date):
            return None
        instance = EarnedInstance(earned_date=current_date)
        self.earned_instances.append(instance)
        return instance

    def _instance(self, instance_index: int) -> EarnedInstance | None:
        if not self.is_carryover_benefit():
            return None
        if instance_index < 0 or instance_index >= len(self.earned_instances):
            return None
        return self.earned_instances[instance_index]

    def set_carryover_instance_usage(self, instance_index: int, amount) -> bool:
        instance = self._instance(instance_index)
        if instance is None:
            return False
        instance.used_amount = coerce_amount(amount, self.total_amount)
        return True

    # ==================== MUTATIONS ====================

    def reset(self, current_date: date) -> None:
        """Start a new period. The only way ``last_reset`` moves forward."""
        self.used_amount = 0
        self.last_reset = current_date

    def mark_fully_claimed(self) -> None:
        self.used_amount = self.total_amount

    def set_used_amount(self, amount) -> None:
        self.used_amount = coerce_amount(amount, self.total_amount)

    def apply_auto_claim(self, current_date: date) -> bool:
        """Force the benefit to fully used while auto-claim is active."""
        if self.is_auto_claim_active(current_date) and self.used_amount < self.total_amount:
            self.mark_fully_claimed()
            return True
        return False

    def apply_claim_policy(self, policy: ClaimPolicy, changed: str | None = None) -> None:
        resolved = resolve_claim_policy(policy, changed)
        self.auto_claim = resolved.auto_claim
        self.auto_claim_end_date = resolved.auto_claim_end_date
        self.ignored = resolved.ignored
        self.ignored_end_date = resolved.ignored_end_date

    def update(self, changes: dict) -> None:
        """Merge user edits, then restore the claim-policy and amount invariants."""
        turned_on = [
            flag for flag in ("auto_claim", "ignored")
            if changes.get(flag) is True and not getattr(self, flag)
        ]
        # Both switched on at once: auto-claim wins
        changed = turned_on[0] if len(turned_on) == 1 else None

        for key, value in changes.items():
            if key in BENEFIT_FIELDS:
                setattr(self, key, value)

        self.total_amount = coerce_amount(self.total_amount)
        self.used_amount = coerce_amount(self.used_amount, self.total_amount)
        if "frequency" in changes:
            self.is_carryover = self.frequency == "carryover"
        if self.frequency in ("one-time", "carryover"):
            self.reset_type = None
            self.last_reset = None
        self.apply_claim_policy(self.claim_policy(), changed)

    # ==================== USAGE JUSTIFICATIONS ====================

    def _justifications(self, instance_index: int | None) -> list[UsageJustification] | None:
        if instance_index is None:
            return self.usage_justifications
        instance = self._instance(instance_index)
        return instance.usage_justifications if instance else None

    def add_usage_justification(
        self,
        amount,
        justification: str,
        reminder_date: date | None = None,
        charge_date: date | None = None,
        instance_index: int | None = None,
    ) -> UsageJustification | None:
        entries = self._justifications(instance_index)
        if entries is None:
            return None
        entry = UsageJustification(
            amount=coerce_amount(amount),
            justification=justification,
            reminder_date=reminder_date,
            charge_date=charge_date,
        )
        entries.append(entry)
        return entry

    def find_usage_justification(
        self, justification_id: str, instance_index: int | None = None
    ) -> UsageJustification | None:
        for entry in self._justifications(instance_index) or []:
            if entry.id == justification_id:
                return entry
        return None

    def remove_usage_justification(self, justification_id: str, instance_index: int | None = None) -> bool:
        entries = self._justifications(instance_index)
        entry = self.find_usage_justification(justification_id, instance_index)
        if entry is None:
            return False
        entries.remove(entry)
        return True

    def update_usage_justification(
        self, justification_id: str, changes: dict, instance_index: int | None = None
    ) -> bool:
        entry = self.find_usage_justification(justification_id, instance_index)
        if entry is None:
            return False
        for key, value in changes.items():
            if key not in JUSTIFICATION_FIELDS:
                continue
            if key == "amount":
                value = coerce_amount(value)
            setattr(entry, key, value)
        return True

    def confirm_justification(self, justification_id: str, instance_index: int | None = None) -> bool:
        return self.update_usage_justification(justification_id, {"confirmed": True}, instance_index)

    def get_total_justified_amount(self, instance_index: int | None = None) -> float:
        return sum(entry.amount or 0 for entry in self._justifications(instance_index) or [])

    def get_pending_reminders(
        self, current_date: date, instance_index: int | None = None
    ) -> list[UsageJustification]:
        return [e for e in self._justifications(instance_index) or [] if e.is_reminder_due(current_date)]
