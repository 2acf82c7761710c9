from dataclasses import dataclass, field
from datetime import date

from benefit_tracker.models.card import Card


@dataclass
class ExpiringItem:
    card_id: str
    card_name: str
    benefit_id: str
    description: str
    remaining_amount: float
    expires_on: date
    instance_index: int | None = None


@dataclass
class ExpiringMinimumSpend:
    card_id: str
    card_name: str
    minimum_spend_id: str
    description: str
    remaining_amount: float
    deadline: date


@dataclass
class ExpiringSummary:
    days: int
    active: list[ExpiringItem] = field(default_factory=list)
    ignored: list[ExpiringItem] = field(default_factory=list)
    fully_used: list[ExpiringItem] = field(default_factory=list)
    minimum_spends: list[ExpiringMinimumSpend] = field(default_factory=list)


def _index_of(items: list, target) -> int:
    return next(i for i, item in enumerate(items) if item is target)


def get_expiring_summary(cards: list[Card], today: date, days: int) -> ExpiringSummary:
    """Value that lapses within ``days`` of ``today``, split the way the dashboard shows it.

    Recurring benefits lapse at their next reset; carryover value lapses per
    earned instance. One-time benefits are not listed.
    """
    summary = ExpiringSummary(days=days)

    for card in cards:
        for benefit in card.benefits:
            items = []
            if benefit.is_carryover_benefit():
                for expiring in benefit.get_expiring_carryover_instances(today, days):
                    instance = expiring.instance
                    items.append(ExpiringItem(
                        card_id=card.id,
                        card_name=card.name,
                        benefit_id=benefit.id,
                        description=benefit.description,
                        remaining_amount=benefit.total_amount - (instance.used_amount or 0),
                        expires_on=expiring.expiry_date,
                        instance_index=_index_of(benefit.earned_instances, instance),
                    ))
            elif benefit.is_recurring() and benefit.expires_within(today, days):
                items.append(ExpiringItem(
                    card_id=card.id,
                    card_name=card.name,
                    benefit_id=benefit.id,
                    description=benefit.description,
                    remaining_amount=benefit.get_remaining_amount(),
                    expires_on=benefit.get_next_reset_date(today),
                ))

            for item in items:
                if item.remaining_amount <= 0:
                    summary.fully_used.append(item)
                elif benefit.is_ignored_active(today):
                    summary.ignored.append(item)
                else:
                    summary.active.append(item)

        for minimum_spend in card.get_minimum_spends_expiring_within(today, days):
            summary.minimum_spends.append(ExpiringMinimumSpend(
                card_id=card.id,
                card_name=card.name,
                minimum_spend_id=minimum_spend.id,
                description=minimum_spend.description,
                remaining_amount=minimum_spend.get_remaining_amount(),
                deadline=minimum_spend.get_deadline(today),
            ))

    summary.active.sort(key=lambda item: item.remaining_amount, reverse=True)
    summary.ignored.sort(key=lambda item: item.remaining_amount, reverse=True)
    summary.fully_used.sort(key=lambda item: item.expires_on)
    summary.minimum_spends.sort(key=lambda item: item.deadline)
    return summary
