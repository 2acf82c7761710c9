from dataclasses import dataclass, field
from datetime import date

from benefit_tracker.models.benefit import Benefit, new_id
from benefit_tracker.models.minimum_spend import MinimumSpend


def move_item(items: list, old_index: int, new_index: int) -> bool:
    if old_index == new_index:
        return False
    if not (0 <= old_index < len(items)) or not (0 <= new_index < len(items)):
        return False
    items.insert(new_index, items.pop(old_index))
    return True


@dataclass
class Card:
    """A credit card owning an ordered list of benefits and minimum spends.

    Every child shares the card's anniversary date; changing it here is the
    only way anniversary-based cycles move.
    """

    name: str
    anniversary_date: date
    id: str = field(default_factory=lambda: new_id("card"))
    benefits: list[Benefit] = field(default_factory=list)
    minimum_spends: list[MinimumSpend] = field(default_factory=list)

    def __post_init__(self):
        for benefit in self.benefits:
            benefit.set_anniversary_date(self.anniversary_date)
        for minimum_spend in self.minimum_spends:
            minimum_spend.set_anniversary_date(self.anniversary_date)

    def update(self, name: str | None = None, anniversary_date: date | None = None) -> None:
        if name is not None:
            self.name = name
        if anniversary_date is not None:
            self.anniversary_date = anniversary_date
            for benefit in self.benefits:
                benefit.set_anniversary_date(anniversary_date)
            for minimum_spend in self.minimum_spends:
                minimum_spend.set_anniversary_date(anniversary_date)

    # ==================== BENEFITS ====================

    def add_benefit(self, benefit: Benefit) -> Benefit:
        benefit.set_anniversary_date(self.anniversary_date)
        self.benefits.append(benefit)
        return benefit

    def remove_benefit(self, benefit_id: str) -> bool:
        benefit = self.find_benefit(benefit_id)
        if benefit is None:
            return False
        self.benefits.remove(benefit)
        return True

    def find_benefit(self, benefit_id: str) -> Benefit | None:
        return next((b for b in self.benefits if b.id == benefit_id), None)

    def reorder_benefits(self, old_index: int, new_index: int) -> bool:
        return move_item(self.benefits, old_index, new_index)

    def get_benefits_needing_reset(self, current_date: date) -> list[Benefit]:
        """Recurring benefits whose period has rolled over. Never mutates."""
        return [b for b in self.benefits if b.is_recurring() and b.needs_reset(current_date)]

    def get_benefits_expiring_within(self, current_date: date, days: int) -> list[Benefit]:
        return [b for b in self.benefits if b.expires_within(current_date, days)]

    def is_all_benefits_used(self, current_date: date) -> bool:
        return len(self.benefits) > 0 and all(b.is_fully_used(current_date) for b in self.benefits)

    def is_benefit_locked(self, benefit: Benefit) -> bool:
        """Locked while the linked minimum spend exists and is not met."""
        if not benefit.has_required_minimum_spend():
            return False
        minimum_spend = self.find_minimum_spend(benefit.required_minimum_spend_id)
        return minimum_spend is not None and not minimum_spend.is_met

    def is_all_benefits_used_or_locked(self, current_date: date) -> bool:
        return len(self.benefits) > 0 and all(
            self.is_benefit_locked(b) or b.is_fully_used(current_date) for b in self.benefits
        )

    def filter_by_used_status(self, current_date: date, fully_used: bool) -> list[Benefit]:
        return [b for b in self.benefits if b.is_fully_used(current_date) == fully_used]

    def filter_by_ignored_status(self, current_date: date, is_ignored: bool) -> list[Benefit]:
        return [b for b in self.benefits if b.is_ignored_active(current_date) == is_ignored]

    def filter_by_auto_claim_status(self, current_date: date, is_auto_claim: bool) -> list[Benefit]:
        return [b for b in self.benefits if b.is_auto_claim_active(current_date) == is_auto_claim]

    def get_recurring_benefits(self) -> list[Benefit]:
        return [b for b in self.benefits if b.is_recurring()]

    def get_carryover_benefits(self) -> list[Benefit]:
        return [b for b in self.benefits if b.is_carryover_benefit()]

    def get_one_time_benefits(self) -> list[Benefit]:
        return [b for b in self.benefits if b.is_one_time()]

    # ==================== MINIMUM SPENDS ====================

    def add_minimum_spend(self, minimum_spend: MinimumSpend) -> MinimumSpend:
        minimum_spend.set_anniversary_date(self.anniversary_date)
        self.minimum_spends.append(minimum_spend)
        return minimum_spend

    def remove_minimum_spend(self, minimum_spend_id: str) -> bool:
        """Remove a minimum spend and unlink every benefit gated on it."""
        minimum_spend = self.find_minimum_spend(minimum_spend_id)
        if minimum_spend is None:
            return False
        self.minimum_spends.remove(minimum_spend)
        for benefit in self.benefits:
            if benefit.required_minimum_spend_id == minimum_spend_id:
                benefit.set_required_minimum_spend_id(None)
        return True

    def find_minimum_spend(self, minimum_spend_id: str | None) -> MinimumSpend | None:
        return next((m for m in self.minimum_spends if m.id == minimum_spend_id), None)

    def get_minimum_spends_needing_reset(self, current_date: date) -> list[MinimumSpend]:
        return [m for m in self.minimum_spends if m.is_recurring() and m.should_reset(current_date)]

    def get_actionable_minimum_spends(self, current_date: date) -> list[MinimumSpend]:
        return [m for m in self.minimum_spends if m.is_actionable(current_date)]

    def get_minimum_spends_expiring_within(self, current_date: date, days: int) -> list[MinimumSpend]:
        return [
            m for m in self.minimum_spends
            if m.is_actionable(current_date) and m.deadline_within(current_date, days)
        ]

    def get_benefits_requiring_minimum_spend(self, minimum_spend_id: str) -> list[Benefit]:
        return [b for b in self.benefits if b.required_minimum_spend_id == minimum_spend_id]

    def get_unlocked_benefits(self, minimum_spend_id: str) -> list[Benefit]:
        minimum_spend = self.find_minimum_spend(minimum_spend_id)
        if minimum_spend is None or not minimum_spend.is_met:
            return []
        return self.get_benefits_requiring_minimum_spend(minimum_spend_id)
