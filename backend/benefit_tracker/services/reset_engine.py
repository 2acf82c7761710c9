"""Period rollover for every benefit on every card.

Each pass classifies all benefits against one reference date before touching
any of them, then applies the automatic transitions:

* ``current``          nothing to do
* ``auto_claimed``     auto-claim active, period still open: force fully used
* ``auto_reset``       period over, auto-claim active: new period, fully used
* ``silent_roll``      period over, ignore active: new period, usage back to 0
* ``pending_manual``   period over, no policy: left untouched for the user

Pending benefits stay exactly as they are until the user accepts them (see
``apply_resets``) or sets a policy; declining changes nothing.
"""
import logging
from dataclasses import dataclass, field
from datetime import date

from benefit_tracker.models.benefit import Benefit
from benefit_tracker.models.card import Card

logger = logging.getLogger(__name__)

CURRENT = "current"
AUTO_CLAIMED = "auto_claimed"
AUTO_RESET = "auto_reset"
SILENT_ROLL = "silent_roll"
PENDING_MANUAL = "pending_manual"


@dataclass
class PendingReset:
    card_id: str
    card_name: str
    benefit_id: str
    description: str
    next_reset_date: date | None
    missed_periods: int


@dataclass
class ResetReport:
    pending: list[PendingReset] = field(default_factory=list)
    auto_claimed: list[str] = field(default_factory=list)
    auto_reset: list[str] = field(default_factory=list)
    silent_rolled: list[str] = field(default_factory=list)
    minimum_spends_reset: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.auto_claimed or self.auto_reset or self.silent_rolled or self.minimum_spends_reset)


def classify_benefit(benefit: Benefit, today: date) -> str:
    if not benefit.is_recurring():
        return CURRENT

    auto_claim = benefit.is_auto_claim_active(today)
    if benefit.needs_reset(today):
        if auto_claim:
            return AUTO_RESET
        if benefit.is_ignored_active(today):
            return SILENT_ROLL
        return PENDING_MANUAL

    if auto_claim and benefit.used_amount < benefit.total_amount:
        return AUTO_CLAIMED
    return CURRENT


def _pending_entry(card: Card, benefit: Benefit, today: date) -> PendingReset:
    cycle = benefit.cycle()
    return PendingReset(
        card_id=card.id,
        card_name=card.name,
        benefit_id=benefit.id,
        description=benefit.description,
        next_reset_date=cycle.calculate_next_reset_date(today),
        missed_periods=cycle.missed_periods(today),
    )


def check_and_reset(cards: list[Card], today: date) -> ResetReport:
    """Run one rollover pass. Mutates automatic cases in place; never touches pending ones."""
    snapshot = [
        (card, benefit, classify_benefit(benefit, today))
        for card in cards
        for benefit in card.benefits
    ]
    minimum_spends_due = [
        minimum_spend
        for card in cards
        for minimum_spend in card.get_minimum_spends_needing_reset(today)
    ]

    report = ResetReport()
    for card, benefit, state in snapshot:
        if state == AUTO_CLAIMED:
            benefit.mark_fully_claimed()
            report.auto_claimed.append(benefit.id)
        elif state == AUTO_RESET:
            benefit.reset(today)
            benefit.mark_fully_claimed()
            report.auto_reset.append(benefit.id)
        elif state == SILENT_ROLL:
            benefit.reset(today)
            report.silent_rolled.append(benefit.id)
        elif state == PENDING_MANUAL:
            report.pending.append(_pending_entry(card, benefit, today))

    for minimum_spend in minimum_spends_due:
        minimum_spend.reset(today)
        report.minimum_spends_reset.append(minimum_spend.id)

    if report.changed or report.pending:
        logger.info(
            "Reset pass for %s: %d auto-claimed, %d auto-reset, %d silently rolled, "
            "%d minimum spend(s) reset, %d pending",
            today,
            len(report.auto_claimed),
            len(report.auto_reset),
            len(report.silent_rolled),
            len(report.minimum_spends_reset),
            len(report.pending),
        )
    return report


def apply_resets(cards: list[Card], benefit_ids: list[str], today: date) -> list[str]:
    """Reset a batch of pending benefits the user accepted.

    Ids that are unknown or no longer due are skipped. The caller persists the
    whole set afterwards and must reload it if that save fails.
    """
    wanted = set(benefit_ids)
    applied = []
    for card in cards:
        for benefit in card.get_benefits_needing_reset(today):
            if benefit.id in wanted:
                benefit.reset(today)
                applied.append(benefit.id)

    skipped = wanted.difference(applied)
    if skipped:
        logger.warning("Skipped %d reset(s) that were unknown or not due: %s", len(skipped), sorted(skipped))
    logger.info("Applied %d manual reset(s)", len(applied))
    return applied


def decline_resets(cards: list[Card], benefit_ids: list[str], today: date) -> list[PendingReset]:
    """Leave pending benefits exactly as they are; they surface again on the next pass."""
    wanted = set(benefit_ids)
    declined = [
        _pending_entry(card, benefit, today)
        for card in cards
        for benefit in card.get_benefits_needing_reset(today)
        if benefit.id in wanted
    ]
    logger.info("Declined %d reset(s)", len(declined))
    return declined
